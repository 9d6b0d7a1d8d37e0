"""CLI application entry point and command routing for intra42.

This module is the **sole error boundary** for the entire application.
It catches :class:`~intra42.exceptions.Intra42Error`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  and infrastructure layers.
* Command output lines go to stdout; everything else goes to stderr
  through the Rich console proxy.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import asyncio
import functools
import os
import sys

from intra42.cli import exit_codes
from intra42.cli.console import console
from intra42.core.models import Command
from intra42.exceptions import Intra42Error
from intra42.version import __version__

API_URL_ENV: str = "INTRA42_API_URL"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The CLI supports:
    * ``intra42 [command]`` — print a profile field (default ``login``)
    * ``intra42 doctor``    — environment diagnostics
    * ``intra42 --version``
    """
    parser = argparse.ArgumentParser(
        prog="intra42",
        description="Print fields of your 42 intra profile.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=Command.LOGIN.value,
        help=(
            "Command to run: "
            + ", ".join(command.value for command in Command)
            + ", or 'doctor' (default: %(default)s)."
        ),
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_command(command: Command) -> int:
    """Run *command* against the configured user's profile.

    Flow:
    1. Build the config store, setup prompter and session opener.
    2. Let the orchestrator ensure configuration, authenticate,
       resolve the user and render.
    """
    from intra42.cli.setup_prompt import QuestionaryPrompter
    from intra42.core.program import Program
    from intra42.core.resolver import API_BASE_URL
    from intra42.infra.config_store import ConfigStore
    from intra42.infra.session import open_session

    base_url = os.environ.get(API_URL_ENV) or API_BASE_URL

    program = Program(
        ConfigStore(),
        QuestionaryPrompter(),
        functools.partial(open_session, base_url=base_url),
        console.echo,
        base_url=base_url,
    )
    asyncio.run(program.run(command))
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from intra42.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the intra42 CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    UnknownCommandError
        If the command name is not recognised.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    target: str = args.command

    if target.strip().lower() == "doctor":
        return _handle_doctor()

    return _handle_command(Command.parse(target))


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except Intra42Error as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
