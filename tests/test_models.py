"""Tests for domain models (core/models.py).

All models are frozen dataclasses — these tests verify immutability,
the credential invariant, and command parsing.
"""

from __future__ import annotations

import dataclasses

import pytest

from intra42.core.models import (
    MAX_CREDENTIAL_LENGTH,
    Command,
    Configuration,
    UserSummary,
)
from intra42.exceptions import UnknownCommandError


def _make_config(**overrides: object) -> Configuration:
    defaults: dict[str, object] = {
        "client_id": "abc",
        "client_secret": "secret",
        "login": "jdoe",
    }
    defaults.update(overrides)
    return Configuration(**defaults)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestConfiguration:
    def test_well_formed_is_usable(self) -> None:
        config = _make_config()
        assert config.is_usable()
        assert config.problems() == []

    @pytest.mark.parametrize("field", ["client_id", "client_secret"])
    def test_empty_credential_is_unusable(self, field: str) -> None:
        config = _make_config(**{field: ""})
        assert not config.is_usable()
        assert f"{field} is empty" in config.problems()

    @pytest.mark.parametrize("field", ["client_id", "client_secret"])
    def test_max_length_is_usable(self, field: str) -> None:
        config = _make_config(**{field: "x" * MAX_CREDENTIAL_LENGTH})
        assert config.is_usable()

    @pytest.mark.parametrize("field", ["client_id", "client_secret"])
    def test_too_long_credential_is_unusable(self, field: str) -> None:
        config = _make_config(**{field: "x" * (MAX_CREDENTIAL_LENGTH + 1)})
        assert not config.is_usable()

    def test_empty_login_is_unusable(self) -> None:
        assert not _make_config(login="").is_usable()

    def test_cursus_defaults_to_none(self) -> None:
        assert _make_config().cursus is None

    def test_frozen(self) -> None:
        config = _make_config()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.login = "other"  # type: ignore[misc]


class TestUserSummary:
    def test_equality(self) -> None:
        assert UserSummary(id=1, login="a") == UserSummary(id=1, login="a")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

class TestCommandParse:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("id", Command.ID),
            ("me", Command.ME),
            ("email", Command.EMAIL),
            ("login", Command.LOGIN),
            ("wallet", Command.WALLET),
            ("blackhole", Command.BLACKHOLE),
            ("correction_point", Command.CORRECTION_POINT),
            ("correction-point", Command.CORRECTION_POINT),
            ("WALLET", Command.WALLET),
            ("  Me ", Command.ME),
        ],
    )
    def test_known_tokens(self, token: str, expected: Command) -> None:
        assert Command.parse(token) is expected

    @pytest.mark.parametrize("token", ["correctionpoint", "", "walet", "doctor"])
    def test_unknown_token_raises(self, token: str) -> None:
        with pytest.raises(UnknownCommandError, match="Unknown command"):
            Command.parse(token)

    def test_hint_lists_commands(self) -> None:
        with pytest.raises(UnknownCommandError) as exc_info:
            Command.parse("nope")
        assert exc_info.value.hint is not None
        assert "correction_point" in exc_info.value.hint
