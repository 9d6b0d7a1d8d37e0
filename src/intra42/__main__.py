"""Allow ``python -m intra42`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m intra42`` behaves identically to the ``intra42``
console script.
"""

from __future__ import annotations

from intra42.cli.app import cli

if __name__ == "__main__":
    cli()
