"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from intra42.core.models import (
    Command,
    Configuration,
    ConfigStatus,
    CursusUser,
    ResolvedUser,
    Title,
    UserProfile,
    UserSummary,
)
from intra42.core.program import Program
from intra42.core.protocols import ConfigSource, Session, SessionOpener, SetupPrompter
from intra42.core.renderers import Dispatcher
from intra42.core.resolver import UserResolver

__all__: list[str] = [
    "Command",
    "ConfigSource",
    "ConfigStatus",
    "Configuration",
    "CursusUser",
    "Dispatcher",
    "Program",
    "ResolvedUser",
    "Session",
    "SessionOpener",
    "SetupPrompter",
    "Title",
    "UserProfile",
    "UserResolver",
    "UserSummary",
]
