"""``subprocess`` backed implementation of :class:`~depotscan.core.protocols.CommandRunner`.

This module is the **only** place in the codebase that spawns external
processes.  Start-up and exit failures are re-raised as typed
:class:`~depotscan.exceptions.DepotScanError` subclasses; write failures
on the output sink are re-raised unchanged so the caller can tell its
own early close apart from a failing command.
"""

from __future__ import annotations

import shlex
import shutil
import subprocess
import tempfile
from typing import BinaryIO

from depotscan.exceptions import (
    CommandExecutionError,
    ConfigurationError,
    P4NotFoundError,
    append_p4_login_suggestion,
)
from depotscan.logging import get_logger

logger = get_logger(__name__)


class SubprocessCommandRunner:
    """Concrete :class:`CommandRunner` that runs commands as child processes.

    Stdout is copied into the sink in fixed-size chunks, so a slow
    reader applies backpressure all the way to the child.  Stderr is
    spooled to a temporary file and quoted in the error on failure.
    """

    _CHUNK_SIZE: int = 64 * 1024
    _STDERR_EXCERPT: int = 2000

    def run(self, command: str, stdout: BinaryIO) -> None:
        """Run *command*, streaming its stdout into *stdout*.

        Raises
        ------
        ConfigurationError
            If *command* is empty or cannot be tokenized.
        P4NotFoundError
            If the executable does not exist.
        CommandExecutionError
            If the process cannot start or exits non-zero.
        OSError
            If writing to *stdout* fails; the child is killed first.
        """
        args = self._split(command)
        logger.debug("running %s", shlex.join(args))

        with tempfile.TemporaryFile() as stderr_file:
            proc = self._spawn(args, stderr_file)
            with proc:
                assert proc.stdout is not None
                try:
                    shutil.copyfileobj(proc.stdout, stdout, self._CHUNK_SIZE)
                    stdout.flush()
                except OSError:
                    logger.debug("output sink closed early, killing %s", args[0])
                    proc.kill()
                    raise
                returncode = proc.wait()
            stderr_text = self._read_stderr(stderr_file)

        logger.debug("%s exited with status %d", args[0], returncode)
        if returncode != 0:
            message = f"command exited with status {returncode}: {command}"
            if stderr_text:
                message = f"{message}\n{stderr_text}"
            raise CommandExecutionError(
                message,
                returncode=returncode,
                hint=append_p4_login_suggestion(
                    "Check the server connection (P4PORT, P4USER, P4CLIENT).",
                ),
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _split(command: str) -> list[str]:
        try:
            args = shlex.split(command)
        except ValueError as exc:
            raise ConfigurationError(f"cannot parse command {command!r}: {exc}") from exc
        if not args:
            raise ConfigurationError("command must not be empty.")
        return args

    @staticmethod
    def _spawn(args: list[str], stderr_file: BinaryIO) -> subprocess.Popen[bytes]:
        try:
            return subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr_file,
            )
        except FileNotFoundError as exc:
            raise P4NotFoundError(
                f"executable not found: {args[0]}",
                hint="Run 'depotscan doctor' or pass --p4 with the full path.",
            ) from exc
        except OSError as exc:
            raise CommandExecutionError(f"could not start {args[0]}: {exc}") from exc

    @classmethod
    def _read_stderr(cls, stderr_file: BinaryIO) -> str:
        stderr_file.seek(0)
        text = stderr_file.read().decode("utf-8", errors="replace").strip()
        if len(text) > cls._STDERR_EXCERPT:
            text = text[: cls._STDERR_EXCERPT] + "..."
        return text
