"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters and the CLI
must satisfy.  Core code depends ONLY on these protocols — never on
concrete implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from intra42.core.models import Configuration, ConfigStatus


class Session(Protocol):
    """Contract for an authenticated intra API session.

    Any object exposing these members satisfies the protocol structurally
    (no explicit inheritance required).
    """

    @property
    def client_id(self) -> str:
        """UID of the OAuth application the session was opened with."""
        ...  # pragma: no cover

    @property
    def login(self) -> str:
        """Login of the configured user."""
        ...  # pragma: no cover

    async def call(self, url: str) -> str:
        """Perform an authenticated GET on *url* and return the raw body.

        Implementations must map all transport exceptions to
        :class:`~intra42.exceptions.SessionError`.
        """
        ...  # pragma: no cover


SessionOpener = Callable[[Configuration], AbstractAsyncContextManager[Session]]
"""Factory that authenticates with a configuration and yields a session."""


class SetupPrompter(Protocol):
    """Interactive capability used once, on first run, to collect secrets."""

    def instructions(self, lines: Sequence[str]) -> None:
        """Show setup guidance to the user."""
        ...  # pragma: no cover

    def ask(self, message: str, *, secret: bool = False) -> str | None:
        """Return the user's answer, or ``None`` when the prompt was cancelled."""
        ...  # pragma: no cover


class ConfigSource(Protocol):
    """Contract for the persisted configuration store."""

    def exists(self) -> bool:
        ...  # pragma: no cover

    def create_interactive(self, prompter: SetupPrompter) -> object:
        ...  # pragma: no cover

    def check(self) -> ConfigStatus:
        ...  # pragma: no cover

    def load(self) -> Configuration:
        ...  # pragma: no cover
