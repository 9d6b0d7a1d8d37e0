"""``intra42 doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies intra42's requirements.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from intra42.cli import exit_codes
from intra42.cli.console import console
from intra42.infra.config_store import ConfigStore
from intra42.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 11)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.11 required)[/red]"
    return "Python", version, status


def _httpx_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the httpx row."""
    try:
        import httpx
    except ImportError:
        return "httpx", "NOT INSTALLED", "[red]FAIL[/red]"
    return "httpx", getattr(httpx, "__version__", "unknown"), "[green]OK[/green]"


def _config_check(store: ConfigStore | None = None) -> tuple[str, str, str]:
    """Return (label, value, status) for the configuration file row.

    A missing file is only a warning: the next run creates it.
    """
    store = store or ConfigStore()
    status = store.check()
    location = str(status.path) if status.path else "unresolved"
    if status.valid:
        return "Config", location, "[green]OK[/green]"
    if not status.found:
        return "Config", f"{location} (not created yet)", "[yellow]WARN[/yellow]"
    return "Config", f"{location} ({status.reason})", "[red]FAIL[/red]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _intra42_version_check() -> tuple[str, str, str]:
    return "intra42", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nintra42 doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    checks = [
        _intra42_version_check(),
        _python_version_check(),
        _httpx_version_check(),
        _config_check(),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="intra42 doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
        if has_failure:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            console.print("[bold green]All checks passed.[/bold green]")
    else:
        _print_plain_doctor_table(checks)
        if has_failure:
            print("Some checks failed.", file=sys.stderr)
        else:
            print("All checks passed.", file=sys.stderr)

    return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS
