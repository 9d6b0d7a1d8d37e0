"""httpx-backed implementation of :class:`~intra42.core.protocols.Session`.

This module is the **only** place in the codebase that imports
``httpx``.  All httpx exceptions are caught here and re-raised as
:class:`~intra42.exceptions.SessionError` — nothing raw escapes the
infrastructure boundary.

The session authenticates with the OAuth2 *client credentials* grant:
one ``POST /oauth/token`` on open, then a bearer token on every call.
No refresh, no retry.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from intra42.core.models import Configuration
from intra42.core.resolver import API_BASE_URL
from intra42.exceptions import AuthenticationError, SessionError, UrlConstructionError

DEFAULT_TIMEOUT_SECONDS: float = 20.0
TOKEN_PATH: str = "/oauth/token"


class IntraSession:
    """Authenticated session over an open :class:`httpx.AsyncClient`.

    Use :func:`open_session` rather than constructing this directly; it
    performs the token exchange and closes the client afterwards.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: Configuration,
        access_token: str,
    ) -> None:
        self._client: httpx.AsyncClient = client
        self._config: Configuration = config
        self._access_token: str = access_token

    @property
    def client_id(self) -> str:
        return self._config.client_id

    @property
    def login(self) -> str:
        return self._config.login

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    async def call(self, url: str) -> str:
        """GET *url* with the bearer token and return the response body.

        Raises
        ------
        SessionError
            On transport failures and non-2xx responses.
        """
        try:
            response = await self._client.get(
                url,
                headers={"Authorization": f"Bearer {self._access_token}"},
            )
        except httpx.InvalidURL as exc:
            raise SessionError(f"Invalid request URL: {exc}") from exc
        except httpx.HTTPError as exc:
            raise SessionError(
                f"Request to the intra API failed: {exc}",
                hint="Check your network connection.",
            ) from exc

        if response.is_error:
            raise SessionError(
                f"intra API returned HTTP {response.status_code} for {response.url.path}",
                status_code=response.status_code,
                hint=_status_hint(response.status_code),
            )
        return response.text

    # ------------------------------------------------------------------
    # Token exchange
    # ------------------------------------------------------------------

    @staticmethod
    async def fetch_token(
        client: httpx.AsyncClient,
        config: Configuration,
    ) -> str:
        """Exchange the application credentials for an access token.

        Raises
        ------
        AuthenticationError
            If the token endpoint rejects the credentials or answers
            with something other than a token.
        SessionError
            On transport failures.
        UrlConstructionError
            If the token endpoint URL is malformed.
        """
        form = {
            "grant_type": "client_credentials",
            "client_id": config.client_id,
            "client_secret": config.client_secret,
        }
        try:
            response = await client.post(TOKEN_PATH, data=form)
        except httpx.InvalidURL as exc:
            raise UrlConstructionError(
                f"Invalid token endpoint URL: {exc}",
                hint="Check INTRA42_API_URL.",
            ) from exc
        except httpx.HTTPError as exc:
            raise SessionError(
                f"Could not reach the intra token endpoint: {exc}",
                hint="Check your network connection.",
            ) from exc

        if response.is_error:
            raise AuthenticationError(
                f"Token request failed with HTTP {response.status_code}",
                status_code=response.status_code,
                hint="Check client_id and client_secret in your config.toml.",
            )

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise AuthenticationError(
                "Token endpoint returned invalid JSON.",
            ) from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthenticationError("Token endpoint returned no access_token.")
        return token


def _status_hint(status_code: int) -> str | None:
    if status_code == 401:
        return "The access token was rejected; check your application credentials."
    if status_code == 404:
        return "The requested user does not exist."
    if status_code == 429:
        return "Rate limited by the intra API; wait a moment and try again."
    if status_code >= 500:
        return "The intra API is having trouble; try again later."
    return None


@asynccontextmanager
async def open_session(
    config: Configuration,
    *,
    base_url: str = API_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[IntraSession]:
    """Authenticate with *config* and yield an :class:`IntraSession`.

    *transport* lets tests plug in :class:`httpx.MockTransport`.

    Raises
    ------
    UrlConstructionError
        If *base_url* is not a well-formed http(s) URL.
    """
    if not base_url.startswith(("http://", "https://")):
        raise UrlConstructionError(
            f"Invalid API base URL: {base_url}",
            hint="The API URL must start with http:// or https://",
        )
    try:
        client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )
    except httpx.InvalidURL as exc:
        raise UrlConstructionError(
            f"Invalid API base URL: {base_url} ({exc})",
            hint="Check INTRA42_API_URL.",
        ) from exc

    async with client:
        token = await IntraSession.fetch_token(client, config)
        yield IntraSession(client, config, token)
