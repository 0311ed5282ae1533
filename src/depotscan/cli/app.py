"""CLI application entry point and command routing for depotscan.

This module is the **sole error boundary** for the entire application.
It catches :class:`~depotscan.exceptions.DepotScanError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages and returning well-defined exit codes.

Architecture notes
------------------
* No parsing or process logic lives here — all work is delegated to the
  core/service and infrastructure layers.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import shlex
import sys
from collections.abc import Sequence

from depotscan.cli import exit_codes
from depotscan.cli.console import console
from depotscan.config import ScanSettings, parse_stream_depth
from depotscan.core.depot_files_service import DepotFilesService
from depotscan.exceptions import (
    CommandExecutionError,
    ConfigurationError,
    DepotScanError,
)
from depotscan.logging import configure_logging
from depotscan.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _stream_depth_arg(raw: str) -> int:
    """``argparse`` type for ``--stream-depth``."""
    try:
        return parse_stream_depth(raw, source="--stream-depth")
    except ConfigurationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands:
    * ``depotscan files <filespec>...``
    * ``depotscan opened [-c CL] [<filespec>...]``
    * ``depotscan run "<p4 -z tag ...>"``
    * ``depotscan doctor``
    """
    parser = argparse.ArgumentParser(
        prog="depotscan",
        description="List Perforce depot files from tagged p4 output.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the commands being run to stderr.",
    )

    p4_options = argparse.ArgumentParser(add_help=False)
    p4_options.add_argument(
        "--p4",
        dest="p4_executable",
        default=None,
        metavar="PATH",
        help="p4 executable to use (default: $DEPOTSCAN_P4 or 'p4').",
    )

    scan_options = argparse.ArgumentParser(add_help=False)
    scan_options.add_argument(
        "--stream-depth",
        type=_stream_depth_arg,
        default=None,
        metavar="N",
        help="Stream depth; looked up from the workspace when omitted.",
    )
    scan_options.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print records as a JSON array on stdout.",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    files = subparsers.add_parser(
        "files",
        parents=[p4_options, scan_options],
        help="List files matching depot file specs.",
    )
    files.add_argument("filespecs", nargs="+", metavar="FILESPEC")

    opened = subparsers.add_parser(
        "opened",
        parents=[p4_options, scan_options],
        help="List files opened in the current workspace.",
    )
    opened.add_argument("-c", "--change", default=None, metavar="CL")
    opened.add_argument("filespecs", nargs="*", metavar="FILESPEC")

    run = subparsers.add_parser(
        "run",
        parents=[p4_options, scan_options],
        help="Run an arbitrary tagged p4 command and list its files.",
    )
    run.add_argument("p4_command", metavar="COMMAND")

    subparsers.add_parser(
        "doctor",
        parents=[p4_options],
        help="Check the environment.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------

def _files_command(p4: str, filespecs: Sequence[str]) -> str:
    return shlex.join([p4, "-z", "tag", "files", *filespecs])


def _opened_command(p4: str, change: str | None, filespecs: Sequence[str]) -> str:
    args = [p4, "-z", "tag", "opened"]
    if change:
        args.extend(["-c", change])
    args.extend(filespecs)
    return shlex.join(args)


def build_service(settings: ScanSettings) -> DepotFilesService:
    """Wire infra adapters into a :class:`DepotFilesService`."""
    from depotscan.infra.p4_stream_depth import P4StreamDepthProvider, StaticStreamDepth
    from depotscan.infra.subprocess_runner import SubprocessCommandRunner

    runner = SubprocessCommandRunner()
    depth_provider: StaticStreamDepth | P4StreamDepthProvider
    if settings.stream_depth is not None:
        depth_provider = StaticStreamDepth(settings.stream_depth)
    else:
        depth_provider = P4StreamDepthProvider(runner, settings.p4_executable)
    return DepotFilesService(runner, depth_provider)


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _settings_from_args(args: argparse.Namespace) -> ScanSettings:
    return ScanSettings.from_env().with_overrides(
        p4_executable=getattr(args, "p4_executable", None),
        stream_depth=getattr(args, "stream_depth", None),
    )


def _handle_scan(args: argparse.Namespace) -> int:
    """Run one tagged p4 command and render its file records."""
    from depotscan.cli.render import render_depot_files

    settings = _settings_from_args(args)
    if args.command == "files":
        command = _files_command(settings.p4_executable, args.filespecs)
    elif args.command == "opened":
        command = _opened_command(settings.p4_executable, args.change, args.filespecs)
    else:
        command = args.p4_command

    service = build_service(settings)
    files = service.run_and_parse(command)
    render_depot_files(files, as_json=args.as_json, title=command)
    return exit_codes.SUCCESS


def _handle_doctor(args: argparse.Namespace) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from depotscan.cli.doctor import run_doctor

    return run_doctor(_settings_from_args(args))


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the depotscan CLI.

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
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.command == "doctor":
        return _handle_doctor(args)

    return _handle_scan(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _print_error(exc: DepotScanError) -> None:
    console.print_labelled("[bold red]Error:[/bold red]", str(exc))
    if exc.hint:
        console.print_labelled("[yellow]Hint:[/yellow]", exc.hint)


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except CommandExecutionError as exc:
        _print_error(exc)
        sys.exit(exit_codes.COMMAND_FAILED)
    except DepotScanError as exc:
        _print_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print_labelled(
            "[bold red]Unexpected error.[/bold red]",
            f"Please report this issue.\n  {type(exc).__name__}: {exc}",
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
