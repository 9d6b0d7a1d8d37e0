"""Core user resolver — the two chained lookups run before any command.

The resolver depends on a :class:`~intra42.core.protocols.Session`
injected at construction time, keeping the core free of any HTTP client
import.  Resolution is always two sequential, dependent calls:

1. ``GET /v2/users?client_id=..&filter[login]=..`` → first element.
2. ``GET /v2/users/{id}?client_id=..`` → full profile.

Guarantees
----------
* No retries, no caching, no concurrency.
* Only :class:`~intra42.exceptions.Intra42Error` subclasses escape.
* All parsing logic is deterministic and stateless.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlencode

from intra42.core.models import (
    CursusUser,
    ResolvedUser,
    Title,
    UserProfile,
    UserSummary,
)
from intra42.core.protocols import Session
from intra42.exceptions import (
    DeserializationError,
    Intra42Error,
    SessionError,
    UrlConstructionError,
    UserNotFoundError,
)

API_BASE_URL: str = "https://api.intra.42.fr"


class UserResolver:
    """Resolve the configured login to a full :class:`UserProfile`.

    Parameters
    ----------
    session:
        Any object satisfying the :class:`Session` protocol.
    base_url:
        Scheme and host of the intra API.
    """

    def __init__(self, session: Session, *, base_url: str = API_BASE_URL) -> None:
        self._session: Session = session
        self._base_url: str = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(self) -> ResolvedUser:
        """Run both lookups, in order, regardless of the command to render."""
        summary = await self.find_user()
        profile = await self.fetch_profile(summary.id)
        return ResolvedUser(summary=summary, profile=profile)

    async def find_user(self) -> UserSummary:
        """Look up the session's login in the users collection.

        Raises
        ------
        UrlConstructionError
            If the client id or login is empty.
        UserNotFoundError
            If the API returns an empty list.
        DeserializationError
            If the body is not a JSON array of user objects.
        """
        url = self.users_url(self._session.client_id, self._session.login)
        body = await self._call(url)
        payload = self._decode(body)
        if not isinstance(payload, list):
            raise DeserializationError(
                "Expected a JSON array from the users endpoint.",
            )
        if not payload:
            raise UserNotFoundError(
                f"No intra user found with login {self._session.login!r}.",
                hint="Check the login in your config.toml.",
            )
        return self._parse_summary(payload[0])

    async def fetch_profile(self, user_id: int) -> UserProfile:
        """Fetch the full profile of *user_id*."""
        url = self.user_url(user_id, self._session.client_id)
        body = await self._call(url)
        return self._parse_profile(self._decode(body))

    # ------------------------------------------------------------------
    # URL construction
    # ------------------------------------------------------------------

    def users_url(self, client_id: str, login: str) -> str:
        """Build the login-filtered users-collection URL."""
        self._validate_base_url()
        if not client_id:
            raise UrlConstructionError("client_id must not be empty.")
        if not login:
            raise UrlConstructionError(
                "login must not be empty.",
                hint="Set login in your config.toml.",
            )
        query = urlencode({"client_id": client_id, "filter[login]": login})
        return f"{self._base_url}/v2/users?{query}"

    def user_url(self, user_id: int, client_id: str) -> str:
        """Build the single-user URL for *user_id*."""
        self._validate_base_url()
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
            raise UrlConstructionError(f"Invalid user id: {user_id!r}")
        if not client_id:
            raise UrlConstructionError("client_id must not be empty.")
        query = urlencode({"client_id": client_id})
        return f"{self._base_url}/v2/users/{user_id}?{query}"

    def _validate_base_url(self) -> None:
        if not self._base_url.startswith(("http://", "https://")):
            raise UrlConstructionError(
                f"Invalid API base URL: {self._base_url}",
                hint="The API URL must start with http:// or https://",
            )

    # ------------------------------------------------------------------
    # Session delegation (safe boundary)
    # ------------------------------------------------------------------

    async def _call(self, url: str) -> str:
        """Call the session and ensure only our exceptions escape."""
        try:
            return await self._session.call(url)
        except Intra42Error:
            # Already one of ours, propagate unchanged.
            raise
        except Exception as exc:
            raise SessionError(f"Unexpected session error: {exc}") from exc

    @staticmethod
    def _decode(body: str) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise DeserializationError(
                f"API returned invalid JSON: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Raw-JSON → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_summary(raw: object) -> UserSummary:
        """Convert one users-collection element to a :class:`UserSummary`."""
        obj = _require_object(raw, "user")
        return UserSummary(
            id=_require_int(obj, "id"),
            login=_require_str(obj, "login"),
        )

    @staticmethod
    def _parse_cursus_user(raw: object) -> CursusUser:
        obj = _require_object(raw, "cursus_users[]")
        cursus = _require_object(obj.get("cursus"), "cursus_users[].cursus")
        return CursusUser(
            cursus_name=_require_str(cursus, "name"),
            grade=_optional_str(obj, "grade"),
            blackholed_at=_optional_str(obj, "blackholed_at"),
            begin_at=_optional_str(obj, "begin_at"),
        )

    @classmethod
    def _parse_profile(cls, raw: object) -> UserProfile:
        """Convert a ``/v2/users/{id}`` body to a :class:`UserProfile`."""
        obj = _require_object(raw, "user profile")
        titles = tuple(
            Title(name=_require_str(_require_object(entry, "titles[]"), "name"))
            for entry in _require_list(obj, "titles")
        )
        cursus_users = tuple(
            cls._parse_cursus_user(entry)
            for entry in _require_list(obj, "cursus_users")
        )
        return UserProfile(
            id=_require_int(obj, "id"),
            displayname=_require_str(obj, "displayname"),
            login=_require_str(obj, "login"),
            email=_require_str(obj, "email"),
            wallet=_require_int(obj, "wallet"),
            correction_point=_require_int(obj, "correction_point"),
            titles=titles,
            cursus_users=cursus_users,
        )


# ---------------------------------------------------------------------------
# Field accessors
# ---------------------------------------------------------------------------

def _require_object(raw: object, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise DeserializationError(f"Expected a JSON object for {what}.")
    return raw


def _require_list(obj: dict[str, Any], key: str) -> list[Any]:
    value = obj.get(key)
    if not isinstance(value, list):
        raise DeserializationError(f"Field {key!r} must be a list.")
    return value


def _require_str(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise DeserializationError(f"Field {key!r} must be a string.")
    return value


def _optional_str(obj: dict[str, Any], key: str) -> str | None:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DeserializationError(f"Field {key!r} must be a string or null.")
    return value


def _require_int(obj: dict[str, Any], key: str) -> int:
    value = obj.get(key)
    # bool is an int subclass; JSON true/false is a schema mismatch here.
    if isinstance(value, bool) or not isinstance(value, int):
        raise DeserializationError(f"Field {key!r} must be an integer.")
    return value
