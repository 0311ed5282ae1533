"""``depotscan doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can run tagged ``p4`` queries.

This module lives in the CLI layer — it may import from ``infra``
and ``config``, and it renders via Rich.  It only collects and
displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from depotscan.cli import exit_codes
from depotscan.cli.console import console, rich_available
from depotscan.config import ScanSettings
from depotscan.infra.p4_detector import detect_p4
from depotscan.version import __version__

_OK = "[green]OK[/green]"
_WARN = "[yellow]WARN[/yellow]"
_FAIL = "[red]FAIL[/red]"

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = _OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _rich_check() -> Check:
    """Return (label, value, status) for the Rich row."""
    if not rich_available():
        return "rich", "not installed (plain output)", _WARN
    try:
        from importlib.metadata import version

        return "rich", version("rich"), _OK
    except Exception:  # noqa: BLE001
        return "rich", "unknown", _OK


def _p4_check(settings: ScanSettings) -> Check:
    """Return (label, value, status) for the p4 client row."""
    status_obj = detect_p4(settings.p4_executable)
    if status_obj.found:
        path_str = str(status_obj.path) if status_obj.path else "found"
        return "p4", path_str, _OK
    return "p4", f"{settings.p4_executable} not found", _FAIL


def _stream_depth_check(settings: ScanSettings) -> Check:
    """Return (label, value, status) for the configured stream depth row."""
    if settings.stream_depth is None:
        return "Stream depth", "from workspace", _OK
    return "Stream depth", str(settings.stream_depth), _OK


def _os_check() -> Check:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, _OK


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\ndepotscan doctor", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<34} {'Status':<8}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<14} {value:<34} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _print_rich_doctor_table(checks: list[Check]) -> None:
    from rich.table import Table

    table = Table(
        title="depotscan doctor",
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


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: ScanSettings | None = None) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    settings = settings or ScanSettings()
    checks = [
        ("depotscan", __version__, _OK),
        _python_version_check(),
        _rich_check(),
        _p4_check(settings),
        _stream_depth_check(settings),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    if rich_available():
        _print_rich_doctor_table(checks)
    else:
        _print_plain_doctor_table(checks)

    p4_status = detect_p4(settings.p4_executable)
    if not p4_status.found and p4_status.install_commands:
        console.print("[yellow]The Perforce client (p4) is not installed.[/yellow]")
        console.print("Install using one of the following:\n")
        for cmd in p4_status.install_commands:
            console.print(f"  [bold]{cmd}[/bold]")
        console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
