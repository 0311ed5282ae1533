"""Allow ``python -m depotscan`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m depotscan`` behaves identically to the ``depotscan``
console script.
"""

from __future__ import annotations

from depotscan.cli.app import cli

if __name__ == "__main__":
    cli()
