"""intra42 — 42 intra profile command-line client.

Authenticates against the intra REST API and prints fields of the
configured user's profile, with a strict layered architecture.
"""

from intra42.version import __version__

__all__: list[str] = ["__version__"]
