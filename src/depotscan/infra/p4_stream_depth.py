"""Stream depth providers.

:class:`P4StreamDepthProvider` asks the server which stream the current
workspace is bound to and counts its path segments::

    $ p4 -z tag client -o
    ... Client dev_ws
    ... Stream //depot/main
    ...

``//depot/main`` has depth 2, so ``//depot/main/Engine/a.cpp`` is listed
as ``Engine/a.cpp``.
"""

from __future__ import annotations

import io
import shlex

from depotscan.core.protocols import CommandRunner
from depotscan.core.ztag_parser import parse_tagged_line
from depotscan.exceptions import (
    ConfigurationError,
    DepotScanError,
    StreamDepthError,
)
from depotscan.logging import get_logger

logger = get_logger(__name__)


def stream_path_depth(stream: str) -> int:
    """Return the number of path segments in a stream path.

    ``stream_path_depth("//depot/main")`` is 2.

    Raises
    ------
    StreamDepthError
        If *stream* is not a ``//`` path with at least one segment.
    """
    if not stream.startswith("//"):
        raise StreamDepthError(f'stream "{stream}" does not begin with "//"')
    segments = [part for part in stream[2:].split("/") if part]
    if not segments:
        raise StreamDepthError(f'stream "{stream}" has no path segments')
    return len(segments)


class StaticStreamDepth:
    """Stream depth provider that always returns a configured value."""

    def __init__(self, depth: int) -> None:
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
            raise ConfigurationError(
                f"stream depth must be a positive integer, got {depth!r}",
            )
        self._depth = depth

    def stream_depth(self) -> int:
        return self._depth


class P4StreamDepthProvider:
    """Derive the stream depth from the current workspace's ``Stream`` field.

    The result is cached after the first successful lookup.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`CommandRunner` protocol.
    p4_executable:
        Name or path of the ``p4`` binary.
    """

    def __init__(self, runner: CommandRunner, p4_executable: str = "p4") -> None:
        self._runner: CommandRunner = runner
        self._p4: str = p4_executable
        self._depth: int | None = None

    def stream_depth(self) -> int:
        """Return the stream depth, querying the server on first use.

        Raises
        ------
        StreamDepthError
            If the workspace has no stream or the output is unusable.
        """
        if self._depth is None:
            stream = self._lookup_stream()
            self._depth = stream_path_depth(stream)
            logger.debug("stream %s has depth %d", stream, self._depth)
        return self._depth

    def _lookup_stream(self) -> str:
        command = f"{shlex.quote(self._p4)} -z tag client -o"
        buffer = io.BytesIO()
        try:
            self._runner.run(command, buffer)
        except DepotScanError as exc:
            raise StreamDepthError(
                f"error looking up stream depth: {exc}",
                hint=exc.hint,
            ) from exc

        for raw in buffer.getvalue().decode("utf-8", errors="replace").splitlines():
            line = raw.strip()
            if not line:
                continue
            try:
                tag, value = parse_tagged_line(line)
            except DepotScanError as exc:
                raise StreamDepthError(f"error looking up stream depth: {exc}") from exc
            if tag == "Stream" and value:
                return value

        raise StreamDepthError(
            "the current workspace is not bound to a stream",
            hint="Pass --stream-depth or set DEPOTSCAN_STREAM_DEPTH.",
        )
