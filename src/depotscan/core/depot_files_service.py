"""Core depot listing service — runs a tagged command and parses its output.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~depotscan.core.protocols.CommandRunner` and a
:class:`~depotscan.core.protocols.StreamDepthProvider` injected at
construction time, keeping the core free of any ``p4`` specifics.

Pipeline
--------
1. Validate that the command requests tagged output.
2. Look up the stream depth.
3. Start the command on a producer thread writing into an OS pipe.
4. Parse the read end on the calling thread.
5. Join the producer, compose errors, sort.

Guarantees
----------
* A parse error always wins over a command error.
* No partial results are returned alongside an error.
* Only :class:`~depotscan.exceptions.DepotScanError` subclasses escape.
"""

from __future__ import annotations

import os

from depotscan.core.models import DepotFile
from depotscan.core.producer import CommandProducer
from depotscan.core.protocols import CommandRunner, StreamDepthProvider
from depotscan.core.sorting import sort_depot_files
from depotscan.core.ztag_parser import ZtagRecordParser, iter_stream_lines
from depotscan.exceptions import (
    CommandExecutionError,
    ConfigurationError,
    DepotScanError,
    StreamDepthError,
)

TAGGED_OUTPUT_FLAGS: tuple[str, ...] = ("-ztag", "-z tag")


def require_tagged_output(command: str) -> None:
    """Raise :class:`ConfigurationError` unless *command* asks for tagged output."""
    if not any(flag in command for flag in TAGGED_OUTPUT_FLAGS):
        raise ConfigurationError(
            f'missing "-z tag" in cmd: {command}',
            hint='Pass "-z tag" as a global option, e.g. "p4 -z tag files //depot/...".',
        )


class DepotFilesService:
    """Service that lists depot files from tagged ``p4`` output.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`CommandRunner` protocol.
    depth_provider:
        Any object satisfying the :class:`StreamDepthProvider` protocol.
    """

    def __init__(
        self,
        runner: CommandRunner,
        depth_provider: StreamDepthProvider,
    ) -> None:
        self._runner: CommandRunner = runner
        self._depth_provider: StreamDepthProvider = depth_provider

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run_and_parse(self, command: str) -> list[DepotFile]:
        """Run *command* and return its file records sorted by path.

        Each record must carry a ``depotFile``; ``action``, ``change``
        and ``type`` are optional.

        Raises
        ------
        ConfigurationError
            If *command* lacks ``-z tag``, or the stream depth is invalid.
        StreamDepthError
            If the stream depth lookup fails.
        ProtocolError
            If the output contains a malformed line or depot path.
        StreamReadError
            If reading the output fails.
        CommandExecutionError
            If the command fails and the output parsed cleanly.
        """
        require_tagged_output(command)
        depth = self._resolve_depth()

        read_fd, write_fd = os.pipe()
        reader = os.fdopen(read_fd, "rb")
        writer = os.fdopen(write_fd, "wb")

        producer = CommandProducer(self._runner, command, writer)
        producer.start()

        parser = ZtagRecordParser(depth)
        try:
            records = parser.parse(iter_stream_lines(reader))
        finally:
            # Closing the read end unblocks a producer stuck on a full pipe.
            reader.close()
            producer_error = producer.join()

        if producer_error is not None:
            self._raise_command_error(producer_error)

        return sort_depot_files(records)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_depth(self) -> int:
        """Call the depth provider and ensure only our exceptions escape."""
        try:
            depth = self._depth_provider.stream_depth()
        except DepotScanError:
            raise
        except Exception as exc:
            raise StreamDepthError(
                f"Unexpected stream depth lookup error: {exc}",
            ) from exc

        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
            raise ConfigurationError(
                f"stream depth must be a positive integer, got {depth!r}",
            )
        return depth

    @staticmethod
    def _raise_command_error(exc: Exception) -> None:
        """Re-raise a producer error as a :class:`DepotScanError`."""
        if isinstance(exc, DepotScanError):
            raise exc
        raise CommandExecutionError(f"error listing files: {exc}") from exc
