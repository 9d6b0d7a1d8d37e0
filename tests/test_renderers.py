"""Tests for the command dispatcher and renderers (core/renderers.py).

Pure tests: lines are collected through the ``emit`` callback and the
clock is fixed.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from intra42.core.models import (
    Command,
    CursusUser,
    ResolvedUser,
    Title,
    UserProfile,
    UserSummary,
)
from intra42.core.renderers import (
    Dispatcher,
    days_until,
    format_line,
    parse_timestamp,
    select_cursus,
    title_prefix,
)
from intra42.exceptions import CursusNotFoundError, TimestampParseError

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _cursus(
    name: str = "42cursus",
    *,
    grade: str | None = "Learner",
    blackholed_at: str | None = "2099-01-01T00:00:00Z",
    begin_at: str | None = "2021-10-04T08:00:00Z",
) -> CursusUser:
    return CursusUser(
        cursus_name=name,
        grade=grade,
        blackholed_at=blackholed_at,
        begin_at=begin_at,
    )


def _profile(**overrides: object) -> UserProfile:
    defaults: dict[str, object] = {
        "id": 4242,
        "displayname": "Jane Doe",
        "login": "jdoe",
        "email": "jdoe@student.42.fr",
        "wallet": 500,
        "correction_point": 7,
        "titles": (Title(name="Archmage %login"),),
        "cursus_users": (
            _cursus("C Piscine", grade=None, blackholed_at=None, begin_at="2021-07-05T07:00:00Z"),
            _cursus(),
        ),
    }
    defaults.update(overrides)
    return UserProfile(**defaults)  # type: ignore[arg-type]


def _user(**overrides: object) -> ResolvedUser:
    return ResolvedUser(
        summary=UserSummary(id=4242, login="jdoe"),
        profile=_profile(**overrides),
    )


def _run(command: Command, user: ResolvedUser, *, cursus: str | None = None) -> list[str]:
    lines: list[str] = []
    Dispatcher(lines.append, now=lambda: NOW, cursus=cursus).dispatch(command, user)
    return lines


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

class TestFormatLine:
    def test_label_column_is_twenty_wide(self) -> None:
        assert format_line("Wallet", 500) == "Wallet              500"
        assert len(format_line("Wallet", "")) == 20

    def test_long_label_is_not_truncated(self) -> None:
        assert format_line("x" * 25, 1) == "x" * 25 + "1"


class TestParseTimestamp:
    def test_zulu(self) -> None:
        assert parse_timestamp("2099-01-01T00:00:00.000Z") == datetime(
            2099, 1, 1, tzinfo=timezone.utc,
        )

    @pytest.mark.parametrize("raw", [None, "", "soon", "2099-13-01T00:00:00Z"])
    def test_invalid(self, raw: str | None) -> None:
        with pytest.raises(TimestampParseError):
            parse_timestamp(raw)

    def test_naive_is_rejected(self) -> None:
        with pytest.raises(TimestampParseError, match="UTC offset"):
            parse_timestamp("2099-01-01T00:00:00")


class TestDaysUntil:
    def test_exact_calendar_days(self) -> None:
        target = datetime(2099, 1, 1, tzinfo=timezone.utc)
        assert days_until(target, NOW) == (target.date() - NOW.date()).days

    def test_past_is_negative(self) -> None:
        assert days_until(datetime(2023, 12, 22, tzinfo=timezone.utc), NOW) == -10

    def test_truncates_toward_zero(self) -> None:
        target = datetime(2023, 12, 31, 12, tzinfo=timezone.utc)
        assert days_until(target, NOW) == 0


class TestTitlePrefix:
    def test_first_token(self) -> None:
        assert title_prefix(_profile()) == "Archmage"

    def test_no_titles(self) -> None:
        assert title_prefix(_profile(titles=())) == ""


class TestSelectCursus:
    def test_latest_begin_wins(self) -> None:
        piscine = _cursus("C Piscine", begin_at="2021-07-05T07:00:00Z")
        main = _cursus("42cursus", begin_at="2021-10-04T08:00:00Z")
        assert select_cursus((main, piscine)) is main

    def test_missing_begin_sorts_first(self) -> None:
        undated = _cursus("Old", begin_at=None)
        dated = _cursus("42cursus")
        assert select_cursus((dated, undated)) is dated

    def test_falls_back_to_last_listed(self) -> None:
        first = _cursus("A", begin_at=None)
        last = _cursus("B", begin_at=None)
        assert select_cursus((first, last)) is last

    def test_preferred_name(self) -> None:
        piscine = _cursus("C Piscine", begin_at="2021-07-05T07:00:00Z")
        main = _cursus("42cursus")
        assert select_cursus((piscine, main), "c piscine") is piscine

    def test_unknown_preferred_name(self) -> None:
        with pytest.raises(CursusNotFoundError) as exc_info:
            select_cursus((_cursus(),), "Piscine Python")
        assert "42cursus" in (exc_info.value.hint or "")

    def test_no_enrollments(self) -> None:
        with pytest.raises(CursusNotFoundError):
            select_cursus(())


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class TestSimpleRenderers:
    def test_id_uses_summary(self) -> None:
        user = ResolvedUser(
            summary=UserSummary(id=1, login="jdoe"),
            profile=_profile(id=2),
        )
        assert _run(Command.ID, user) == ["ID                  1"]

    def test_login(self) -> None:
        assert _run(Command.LOGIN, _user()) == ["Login               jdoe"]

    def test_email(self) -> None:
        assert _run(Command.EMAIL, _user()) == ["Email               jdoe@student.42.fr"]

    def test_wallet(self) -> None:
        assert _run(Command.WALLET, _user(wallet=500)) == ["Wallet              500"]

    def test_correction_point(self) -> None:
        assert _run(Command.CORRECTION_POINT, _user()) == ["Correction point    7"]


class TestBlackhole:
    def test_days_remaining(self) -> None:
        expected = (datetime(2099, 1, 1).date() - NOW.date()).days
        assert _run(Command.BLACKHOLE, _user()) == [format_line("Blackhole", expected)]
        assert expected > 0

    def test_already_past(self) -> None:
        user = _user(cursus_users=(_cursus(blackholed_at="2023-12-22T00:00:00Z"),))
        assert _run(Command.BLACKHOLE, user) == [format_line("Blackhole", -10)]

    def test_missing_timestamp_raises(self) -> None:
        user = _user(cursus_users=(_cursus(blackholed_at=None),))
        with pytest.raises(TimestampParseError):
            _run(Command.BLACKHOLE, user)

    def test_preferred_cursus(self) -> None:
        with pytest.raises(TimestampParseError):
            _run(Command.BLACKHOLE, _user(), cursus="C Piscine")


class TestMe:
    def test_full_output(self) -> None:
        expected_days = (datetime(2099, 1, 1).date() - NOW.date()).days
        assert _run(Command.ME, _user()) == [
            "Jane Doe | Archmage jdoe",
            "Wallet              500",
            "Correction point    7",
            "Cursus              42cursus",
            "Grade               Learner",
            format_line("Blackhole", expected_days),
        ]

    def test_no_titles(self) -> None:
        lines = _run(Command.ME, _user(titles=()))
        assert lines[0] == "Jane Doe |  jdoe"

    def test_missing_grade_is_empty(self) -> None:
        lines = _run(Command.ME, _user(cursus_users=(_cursus(grade=None),)))
        assert lines[4] == "Grade               "

    def test_partial_output_before_failure(self) -> None:
        lines: list[str] = []
        dispatcher = Dispatcher(lines.append, now=lambda: NOW)
        user = _user(cursus_users=(_cursus(blackholed_at=None),))
        with pytest.raises(TimestampParseError):
            dispatcher.dispatch(Command.ME, user)
        assert len(lines) == 5
        assert lines[-1].startswith("Grade")
