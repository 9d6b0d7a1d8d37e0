"""Custom exception hierarchy for intra42.

All exceptions that cross layer boundaries must inherit from
:class:`Intra42Error`.  Raw third-party exceptions (e.g. from httpx or
``tomllib``) must NEVER propagate beyond the infrastructure layer — they
must be caught and re-raised as a typed subclass defined here.

Hierarchy
---------
Intra42Error
├── ConfigurationError
│   ├── ConfigurationMissingError
│   └── ConfigurationInvalidError
├── FileSystemError
├── SessionError
│   └── AuthenticationError
├── UrlConstructionError
├── DeserializationError
├── TimestampParseError
├── UserNotFoundError
├── CursusNotFoundError
├── UnknownCommandError
└── EnvironmentError
"""

from __future__ import annotations


class Intra42Error(Exception):
    """Base exception for all intra42 errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(Intra42Error):
    """Base class for configuration file problems."""


class ConfigurationMissingError(ConfigurationError):
    """Raised when no configuration file exists after setup."""


class ConfigurationInvalidError(ConfigurationError):
    """Raised when the configuration file exists but is unusable."""


class FileSystemError(Intra42Error):
    """Raised when the config directory or file cannot be resolved, created or written."""


# --- Session / transport ---------------------------------------------------

class SessionError(Intra42Error):
    """Raised when an authenticated API call fails."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int | None = status_code
        """HTTP status of the failed response, or ``None`` for transport errors."""


class AuthenticationError(SessionError):
    """Raised when the OAuth token exchange is rejected."""


# --- User resolution -------------------------------------------------------

class UrlConstructionError(Intra42Error):
    """Raised when an API URL cannot be built from the given parameters."""


class DeserializationError(Intra42Error):
    """Raised when an API response does not match the expected JSON shape."""


class UserNotFoundError(Intra42Error):
    """Raised when the login-filtered user list is empty."""


# --- Rendering -------------------------------------------------------------

class TimestampParseError(Intra42Error):
    """Raised when a blackhole timestamp is missing or malformed."""


class CursusNotFoundError(Intra42Error):
    """Raised when no cursus enrollment can be selected for the profile."""


class UnknownCommandError(Intra42Error):
    """Raised when the requested command name is not recognised."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(Intra42Error):
    """Raised when a required runtime dependency is not available."""
