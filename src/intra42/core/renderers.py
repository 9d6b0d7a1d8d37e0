"""Command dispatch and profile field renderers.

Every renderer formats one or more lines as a fixed-width 20-character
label column followed by the value, and hands each line to an ``emit``
callback as soon as it is ready.  Composite renderers (``me``) therefore
leave earlier lines visible when a later sub-step fails.

No ``print()`` here; the CLI layer decides where lines go.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

from intra42.core.models import (
    Command,
    CursusUser,
    ResolvedUser,
    UserProfile,
    UserSummary,
)
from intra42.exceptions import CursusNotFoundError, TimestampParseError

LABEL_WIDTH: int = 20

Emit = Callable[[str], None]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def format_line(label: str, value: object) -> str:
    """Render ``label`` left-aligned in the label column, then ``value``."""
    return f"{label:<{LABEL_WIDTH}}{value}"


def parse_timestamp(raw: str | None) -> datetime:
    """Parse an API ISO-8601 timestamp into an aware :class:`datetime`.

    A missing value is treated as the empty string, which does not parse.

    Raises
    ------
    TimestampParseError
        If *raw* is missing, malformed, or carries no UTC offset.
    """
    text = raw or ""
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise TimestampParseError(
            f"Invalid timestamp: {text!r}",
            hint="The selected cursus may have no blackhole date.",
        ) from exc
    if parsed.tzinfo is None:
        raise TimestampParseError(f"Timestamp has no UTC offset: {text!r}")
    return parsed


def days_until(target: datetime, now: datetime) -> int:
    """Signed whole days from *now* to *target*, truncated toward zero."""
    return int((target - now) / timedelta(days=1))


def title_prefix(profile: UserProfile) -> str:
    """First space-delimited token of the first title, or ``""``."""
    if not profile.titles:
        return ""
    return profile.titles[0].name.split(" ")[0]


def select_cursus(
    cursus_users: Sequence[CursusUser],
    preferred: str | None = None,
) -> CursusUser:
    """Pick the enrollment the cursus-dependent renderers report on.

    Rules
    -----
    * With *preferred*, the first enrollment whose name matches it
      (case-insensitive).
    * Otherwise the enrollment with the latest ``begin_at``; enrollments
      without a parseable ``begin_at`` sort first.
    * Ties keep list order, so the last listed enrollment wins.

    Raises
    ------
    CursusNotFoundError
        If there are no enrollments, or none matches *preferred*.
    """
    if not cursus_users:
        raise CursusNotFoundError("The profile has no cursus enrollment.")

    if preferred:
        wanted = preferred.strip().lower()
        for entry in cursus_users:
            if entry.cursus_name.lower() == wanted:
                return entry
        available = ", ".join(entry.cursus_name for entry in cursus_users)
        raise CursusNotFoundError(
            f"No cursus named {preferred!r} on this profile.",
            hint=f"Available cursus: {available}",
        )

    best_index = 0
    best_key: tuple[int, datetime] | None = None
    for index, entry in enumerate(cursus_users):
        key = _begin_key(entry)
        if best_key is None or key >= best_key:
            best_index, best_key = index, key
    return cursus_users[best_index]


def _begin_key(entry: CursusUser) -> tuple[int, datetime]:
    floor = datetime.min.replace(tzinfo=timezone.utc)
    if not entry.begin_at:
        return (0, floor)
    try:
        begun = datetime.fromisoformat(entry.begin_at)
    except ValueError:
        return (0, floor)
    if begun.tzinfo is None:
        begun = begun.replace(tzinfo=timezone.utc)
    return (1, begun)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class Dispatcher:
    """Map a :class:`Command` to its renderer and run it.

    Parameters
    ----------
    emit:
        Called once per output line, in order.
    now:
        Clock used by the blackhole renderer.
    cursus:
        Optional preferred cursus name, see :func:`select_cursus`.
    """

    def __init__(
        self,
        emit: Emit,
        *,
        now: Clock = utc_now,
        cursus: str | None = None,
    ) -> None:
        self._emit: Emit = emit
        self._now: Clock = now
        self._cursus: str | None = cursus

    def dispatch(self, command: Command, user: ResolvedUser) -> None:
        """Render *command* for an already resolved *user*."""
        if command is Command.ID:
            self.id(user.summary)
        elif command is Command.ME:
            self.me(user.profile)
        elif command is Command.EMAIL:
            self.email(user.profile)
        elif command is Command.LOGIN:
            self.login(user.profile)
        elif command is Command.CORRECTION_POINT:
            self.correction_point(user.profile)
        elif command is Command.WALLET:
            self.wallet(user.profile)
        elif command is Command.BLACKHOLE:
            self.blackhole(user.profile)

    # ------------------------------------------------------------------
    # Renderers
    # ------------------------------------------------------------------

    def id(self, summary: UserSummary) -> None:
        self._emit(format_line("ID", summary.id))

    def login(self, profile: UserProfile) -> None:
        self._emit(format_line("Login", profile.login))

    def email(self, profile: UserProfile) -> None:
        self._emit(format_line("Email", profile.email))

    def wallet(self, profile: UserProfile) -> None:
        self._emit(format_line("Wallet", profile.wallet))

    def correction_point(self, profile: UserProfile) -> None:
        self._emit(format_line("Correction point", profile.correction_point))

    def blackhole(self, profile: UserProfile) -> None:
        cursus = select_cursus(profile.cursus_users, self._cursus)
        target = parse_timestamp(cursus.blackholed_at)
        self._emit(format_line("Blackhole", days_until(target, self._now())))

    def me(self, profile: UserProfile) -> None:
        """Identity line, wallet, correction points, cursus, grade, blackhole."""
        self._emit(
            f"{profile.displayname} | {title_prefix(profile)} {profile.login}"
        )
        self.wallet(profile)
        self.correction_point(profile)
        cursus = select_cursus(profile.cursus_users, self._cursus)
        self._emit(format_line("Cursus", cursus.cursus_name))
        self._emit(format_line("Grade", cursus.grade or ""))
        self.blackhole(profile)
