"""Domain models for intra42.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and small derived checks.  They carry zero
I/O and zero dependencies on external packages.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

from intra42.exceptions import UnknownCommandError

MAX_CREDENTIAL_LENGTH: int = 256
"""Upper bound for ``client_id`` and ``client_secret``."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Configuration:
    """Credentials and identity persisted in the user config file."""

    client_id: str
    """UID of the intra OAuth application."""

    client_secret: str
    """Secret of the intra OAuth application."""

    login: str
    """Intra login of the user whose profile is shown."""

    cursus: str | None = None
    """Optional cursus name used to pick the enrollment to report on."""

    def problems(self) -> list[str]:
        """Return every violated invariant as a human-readable sentence."""
        found: list[str] = []
        for name in ("client_id", "client_secret"):
            value: str = getattr(self, name)
            if not value:
                found.append(f"{name} is empty")
            elif len(value) > MAX_CREDENTIAL_LENGTH:
                found.append(
                    f"{name} is longer than {MAX_CREDENTIAL_LENGTH} characters"
                )
        if not self.login:
            found.append("login is empty")
        return found

    def is_usable(self) -> bool:
        return not self.problems()


@dataclass(frozen=True, slots=True)
class ConfigStatus:
    """Result of probing the configuration file.

    Attributes
    ----------
    found : bool
        Whether a file exists at :attr:`path`.
    valid : bool
        Whether the file parsed and satisfies the credential invariant.
    path : Path | None
        Location probed, or ``None`` when the config directory could
        not be resolved.
    reason : str | None
        Why the configuration is unusable.  ``None`` when valid.
    """

    found: bool
    valid: bool
    path: Path | None
    reason: str | None = None


# ---------------------------------------------------------------------------
# API resources
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UserSummary:
    """One element of the login-filtered ``/v2/users`` collection."""

    id: int
    login: str


@dataclass(frozen=True, slots=True)
class Title:
    name: str


@dataclass(frozen=True, slots=True)
class CursusUser:
    """A user's enrollment in one cursus."""

    cursus_name: str
    grade: str | None
    blackholed_at: str | None
    """Raw ISO-8601 timestamp as sent by the API, or ``None``."""

    begin_at: str | None = None


@dataclass(frozen=True, slots=True)
class UserProfile:
    """The ``/v2/users/{id}`` resource, reduced to the rendered fields."""

    id: int
    displayname: str
    login: str
    email: str
    wallet: int
    correction_point: int
    titles: tuple[Title, ...]
    cursus_users: tuple[CursusUser, ...]


@dataclass(frozen=True, slots=True)
class ResolvedUser:
    """Both lookups of one invocation, handed to the dispatcher as a unit."""

    summary: UserSummary
    profile: UserProfile


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class Command(enum.Enum):
    """Closed set of profile renderers selectable from the command line."""

    ID = "id"
    ME = "me"
    EMAIL = "email"
    LOGIN = "login"
    CORRECTION_POINT = "correction_point"
    WALLET = "wallet"
    BLACKHOLE = "blackhole"

    @classmethod
    def parse(cls, token: str) -> Command:
        """Map a free-text command token to a :class:`Command`.

        Matching is case-insensitive and ``-`` is accepted in place of
        ``_``.  There is no fallback: anything else is an error.

        Raises
        ------
        UnknownCommandError
            If *token* does not name a command.
        """
        normalized = token.strip().lower().replace("-", "_")
        for command in cls:
            if command.value == normalized:
                return command
        raise UnknownCommandError(
            f"Unknown command: {token!r}",
            hint="Available commands: " + ", ".join(c.value for c in cls),
        )
