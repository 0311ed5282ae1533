"""Background producer that feeds command output into a pipe.

The producer owns the write end of the pipe.  It runs the command on a
separate thread and closes the write end when the command finishes,
successfully or not, so the reader always observes end of stream.

The stored error is only safe to read after :meth:`CommandProducer.join`
returns.
"""

from __future__ import annotations

import threading
from typing import BinaryIO

from depotscan.core.protocols import CommandRunner


class CommandProducer:
    """Run one command on a daemon thread, streaming stdout into *sink*.

    Usage::

        producer = CommandProducer(runner, "p4 -z tag files //...", writer)
        producer.start()
        ...  # read from the other end of the pipe
        error = producer.join()
    """

    def __init__(self, runner: CommandRunner, command: str, sink: BinaryIO) -> None:
        self._runner: CommandRunner = runner
        self._command: str = command
        self._sink: BinaryIO = sink
        self._error: Exception | None = None
        self._thread = threading.Thread(
            target=self._run,
            name="depotscan-producer",
            daemon=True,
        )

    def start(self) -> None:
        """Start running the command in the background."""
        self._thread.start()

    def join(self) -> Exception | None:
        """Wait for the command to finish and return its error, if any."""
        self._thread.join()
        return self._error

    def _run(self) -> None:
        try:
            self._runner.run(self._command, self._sink)
        except Exception as exc:
            self._error = exc
        finally:
            self._close_sink()

    def _close_sink(self) -> None:
        # Flushing may fail once the reader has gone away; the first
        # error is the one reported.
        try:
            self._sink.close()
        except OSError as exc:
            if self._error is None:
                self._error = exc
