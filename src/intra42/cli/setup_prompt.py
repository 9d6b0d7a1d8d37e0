"""First-run setup prompts for the CLI layer.

This module is responsible for:

* Showing the OAuth application registration steps.
* Asking for client id, client secret and login via questionary.

It implements :class:`~intra42.core.protocols.SetupPrompter`; the config
store decides what to do with the answers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from intra42.cli.console import console
from intra42.exceptions import EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive input."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


class QuestionaryPrompter:
    """Interactive :class:`SetupPrompter` backed by questionary."""

    def instructions(self, lines: Sequence[str]) -> None:
        console.print()
        console.print("[bold cyan]No intra42 configuration found.[/bold cyan]")
        for line in lines:
            console.print(f"  {line}")
        console.print()

    def ask(self, message: str, *, secret: bool = False) -> str | None:
        """Return the answer, or ``None`` on Ctrl+C / Esc."""
        questionary = _import_questionary()
        if secret:
            question = questionary.password(message)
        else:
            question = questionary.text(message)
        return question.ask()
