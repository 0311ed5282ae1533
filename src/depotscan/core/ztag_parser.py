"""Tokenizer and field interpreter for ``p4 -z tag`` output.

Tagged output is a sequence of records separated by blank lines.  Each
record line has the form ``... <tag> <value>``::

    ... depotFile //depot/main/Engine/a.cpp
    ... action edit
    ... change 100
    ... type text

Rules
-----
* A blank line ends the current record.  Records without a
  ``depotFile`` are dropped silently.
* Any other line must carry the ``... `` marker, otherwise the whole
  stream is rejected with :class:`~depotscan.exceptions.ProtocolError`.
* Unknown tags are ignored so newer servers can add fields.
* A final record that is not followed by a blank line is dropped.
  ``p4`` always terminates records, so this only affects truncated
  streams.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import BinaryIO

from depotscan.core.depot_prefix import DepotPrefixResolver
from depotscan.core.models import DepotFile
from depotscan.exceptions import ProtocolError, StreamReadError

TAG_MARKER = "... "
_MIN_LINE_LENGTH = 5


# ---------------------------------------------------------------------------
# Line-level helpers
# ---------------------------------------------------------------------------

def parse_tagged_line(line: str) -> tuple[str, str]:
    """Split a stripped ``... <tag> <value>`` line into ``(tag, value)``.

    Raises
    ------
    ProtocolError
        If *line* is too short or lacks the ``... `` marker.
    """
    if len(line) < _MIN_LINE_LENGTH or not line.startswith(TAG_MARKER):
        raise ProtocolError(
            f'expected "... <tag>", but got: {line}',
            line=line,
        )
    tag, _, value = line[len(TAG_MARKER):].partition(" ")
    return tag, value.strip()


def iter_stream_lines(stream: BinaryIO) -> Iterator[bytes]:
    """Yield raw lines from *stream* until end of file.

    Read failures surface as :class:`StreamReadError`.
    """
    while True:
        try:
            raw = stream.readline()
        except (OSError, ValueError) as exc:
            raise StreamReadError(f"error scanning for files: {exc}") from exc
        if not raw:
            return
        yield raw


def _decode(raw: bytes | str) -> str:
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Record assembly
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _PendingRecord:
    """Mutable accumulator for the record currently being read."""

    path: str = ""
    action: str = ""
    cl: str = ""
    type: str = ""

    def freeze(self) -> DepotFile:
        return DepotFile(
            path=self.path,
            action=self.action,
            cl=self.cl,
            type=self.type,
        )


_FieldSetter = Callable[[_PendingRecord, str], None]


def _set_action(record: _PendingRecord, value: str) -> None:
    record.action = value


def _set_change(record: _PendingRecord, value: str) -> None:
    record.cl = value


def _set_type(record: _PendingRecord, value: str) -> None:
    record.type = value


def _ignore_tag(record: _PendingRecord, value: str) -> None:
    """Default for tags this parser does not know about: do nothing."""


class ZtagRecordParser:
    """Turn tagged output lines into :class:`DepotFile` records.

    Parameters
    ----------
    depth:
        Stream depth used to resolve the stream root from the first
        ``depotFile`` value.
    """

    def __init__(self, depth: int) -> None:
        self._resolver = DepotPrefixResolver(depth)
        self._setters: dict[str, _FieldSetter] = {
            "depotFile": self._set_depot_file,
            "action": _set_action,
            "change": _set_change,
            "type": _set_type,
        }

    @property
    def prefix(self) -> str | None:
        """Stream root prefix, once the first ``depotFile`` was seen."""
        return self._resolver.prefix

    def parse(self, lines: Iterable[bytes | str]) -> list[DepotFile]:
        """Parse *lines* and return the records in stream order.

        Raises
        ------
        ProtocolError
            On the first malformed line or unusable depot path.
        StreamReadError
            If *lines* fails while being read.
        """
        records: list[DepotFile] = []
        pending = _PendingRecord()

        for raw in lines:
            line = _decode(raw).strip()
            if not line:
                if pending.path:
                    records.append(pending.freeze())
                pending = _PendingRecord()
                continue

            tag, value = parse_tagged_line(line)
            self._setters.get(tag, _ignore_tag)(pending, value)

        return records

    def _set_depot_file(self, record: _PendingRecord, value: str) -> None:
        record.path = self._resolver.strip(value)
