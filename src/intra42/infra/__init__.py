"""Infrastructure layer — external system integration.

This layer wraps all interaction with the intra REST API and the user's
configuration file.  Every raw third-party exception must be caught here
and re-raised as an :class:`~intra42.exceptions.Intra42Error` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
* ``intra42.infra.session`` is the only module importing httpx; it is
  not re-exported here so that ``--help`` and ``doctor`` never need it.
"""

from intra42.infra.config_store import ConfigStore, default_config_path, user_config_dir

__all__: list[str] = [
    "ConfigStore",
    "default_config_path",
    "user_config_dir",
]
