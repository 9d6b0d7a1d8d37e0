"""Smoke tests — verify package wiring.

These tests prove that:
* The CLI entry point is importable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

import pytest

from intra42 import __version__
from intra42.cli import exit_codes
from intra42.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConfigurationInvalidError,
    ConfigurationMissingError,
    CursusNotFoundError,
    DeserializationError,
    EnvironmentError,
    FileSystemError,
    Intra42Error,
    SessionError,
    TimestampParseError,
    UnknownCommandError,
    UrlConstructionError,
    UserNotFoundError,
)


class TestVersion:
    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            FileSystemError,
            SessionError,
            UrlConstructionError,
            DeserializationError,
            TimestampParseError,
            UserNotFoundError,
            CursusNotFoundError,
            UnknownCommandError,
            EnvironmentError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[Intra42Error]
    ) -> None:
        assert issubclass(exc_class, Intra42Error)

    def test_configuration_subclasses(self) -> None:
        assert issubclass(ConfigurationMissingError, ConfigurationError)
        assert issubclass(ConfigurationInvalidError, ConfigurationError)

    def test_authentication_is_session_error(self) -> None:
        assert issubclass(AuthenticationError, SessionError)

    def test_hint_is_stored(self) -> None:
        err = Intra42Error("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_session_error_status(self) -> None:
        err = SessionError("HTTP 404", status_code=404)
        assert err.status_code == 404
        assert err.hint is None


class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.KEYBOARD_INTERRUPT == 130

    def test_cli_is_importable(self) -> None:
        from intra42.cli.app import cli

        assert callable(cli)
