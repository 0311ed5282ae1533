"""Rendering of depot file listings for the CLI layer.

Two output modes:

* a Rich table on stderr (plain aligned text when Rich is missing);
* a JSON array on stdout for scripting (``--json``).

All display-related logic lives here — no business logic, no command
execution, no parsing.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict

from depotscan.cli.console import console, out, rich_available
from depotscan.core.models import DepotFile

_COLUMNS: tuple[str, ...] = ("Path", "Action", "CL", "Type")


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms — no I/O themselves)
# ---------------------------------------------------------------------------

def _row(depot_file: DepotFile) -> tuple[str, str, str, str]:
    """Return the display cells for one record, ``"—"`` for blanks."""
    return (
        depot_file.path,
        depot_file.action or "—",
        depot_file.cl or "—",
        depot_file.type or "—",
    )


def format_json(files: Sequence[DepotFile]) -> str:
    """Serialise *files* as a JSON array of objects."""
    return json.dumps([asdict(depot_file) for depot_file in files], indent=2)


def format_plain_table(files: Sequence[DepotFile]) -> str:
    """Render *files* as left-aligned plain-text columns."""
    rows = [_COLUMNS, *(_row(depot_file) for depot_file in files)]
    widths = [max(len(row[i]) for row in rows) for i in range(len(_COLUMNS))]
    lines = [
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    ]
    lines.insert(1, "  ".join("-" * width for width in widths))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def render_depot_files(
    files: Sequence[DepotFile],
    *,
    as_json: bool = False,
    title: str = "Depot files",
) -> None:
    """Print *files* in the requested output mode."""
    if as_json:
        out.write_raw(format_json(files) + "\n")
        return

    if not files:
        console.print("[yellow]No files matched.[/yellow]")
        return

    if not rich_available():
        console.write_raw(format_plain_table(files) + "\n")
        console.write_raw(f"{len(files)} file(s)\n")
        return

    from rich.markup import escape
    from rich.table import Table

    table = Table(
        title=escape(title),
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("Path", justify="left", style="bold", overflow="fold")
    table.add_column("Action", justify="left", min_width=8)
    table.add_column("CL", justify="right", min_width=6)
    table.add_column("Type", justify="left", min_width=6)

    for depot_file in files:
        table.add_row(*(escape(cell) for cell in _row(depot_file)))

    console.print(table)
    console.print(f"[dim]{len(files)} file(s)[/dim]")
