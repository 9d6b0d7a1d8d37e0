"""Entry orchestrator — configuration, session, resolution, dispatch.

The orchestrator owns no I/O of its own: the configuration store, the
one-shot setup prompter and the session opener are all injected, so
tests can substitute every collaborator.

Flow
----
1. If no configuration exists, run interactive creation exactly once.
2. Always validate; any unusable configuration fails fast.
3. Open the authenticated session (token exchange happens here).
4. Resolve the user (two sequential lookups).
5. Dispatch the command to its renderer.

The first failure propagates unmodified.
"""

from __future__ import annotations

from intra42.core.models import Command, Configuration
from intra42.core.protocols import ConfigSource, SessionOpener, SetupPrompter
from intra42.core.renderers import Clock, Dispatcher, Emit, utc_now
from intra42.core.resolver import API_BASE_URL, UserResolver
from intra42.exceptions import ConfigurationInvalidError, ConfigurationMissingError


class Program:
    """Tie the configuration store, session and dispatcher together.

    Parameters
    ----------
    store:
        Any object satisfying :class:`ConfigSource`.
    prompter:
        Setup capability handed to the store on first run.
    open_session:
        Async context manager factory yielding an authenticated session.
    emit:
        Receives each rendered output line.
    """

    def __init__(
        self,
        store: ConfigSource,
        prompter: SetupPrompter,
        open_session: SessionOpener,
        emit: Emit,
        *,
        now: Clock = utc_now,
        base_url: str = API_BASE_URL,
    ) -> None:
        self._store: ConfigSource = store
        self._prompter: SetupPrompter = prompter
        self._open_session: SessionOpener = open_session
        self._emit: Emit = emit
        self._now: Clock = now
        self._base_url: str = base_url

    def ensure_configuration(self) -> Configuration:
        """Create the configuration if needed, then validate and load it.

        Raises
        ------
        ConfigurationMissingError
            If no file exists even after interactive creation.
        ConfigurationInvalidError
            If the file cannot be read, parsed, or fails validation,
            including a file written by setup in this same call.
        """
        if not self._store.exists():
            self._store.create_interactive(self._prompter)

        status = self._store.check()
        if not status.found:
            raise ConfigurationMissingError(
                status.reason or "Configuration file not found.",
                hint="Run intra42 again to go through the setup.",
            )
        if not status.valid:
            raise ConfigurationInvalidError(
                status.reason or "Configuration file is invalid.",
                hint=f"Fix or delete {status.path} and run intra42 again.",
            )
        return self._store.load()

    async def run(self, command: Command) -> None:
        """Execute *command* end to end."""
        config = self.ensure_configuration()
        async with self._open_session(config) as session:
            user = await UserResolver(session, base_url=self._base_url).resolve()
        Dispatcher(self._emit, now=self._now, cursus=config.cursus).dispatch(
            command, user,
        )
