"""Stream root prefix resolution for depot paths.

Every path in one query shares the same stream root, so the root is
derived structurally from the first path seen and the stream depth,
with no extra server round-trip.
"""

from __future__ import annotations

from depotscan.exceptions import DepotPrefixError

_DEPOT_ROOT = "//"


def depot_prefix(raw_path: str, depth: int) -> str:
    """Return ``//`` plus the first *depth* slash-terminated segments.

    ``depot_prefix("//depot/main/Engine/foo.cpp", 2)`` returns
    ``"//depot/main/"``.

    Raises
    ------
    DepotPrefixError
        If *raw_path* does not begin with ``//`` or has fewer than
        *depth* slash-terminated segments.
    """
    if not raw_path.startswith(_DEPOT_ROOT):
        raise DepotPrefixError(
            f'error parsing depot prefix: line "{raw_path}" does not begin with "//"',
            line=raw_path,
        )

    end = len(_DEPOT_ROOT)
    for _ in range(depth):
        slash = raw_path.find("/", end)
        if slash < 0:
            raise DepotPrefixError(
                f'error parsing depot prefix: "{raw_path}" is shallower '
                f"than stream depth {depth}",
                line=raw_path,
                hint="Check the stream depth setting for this depot.",
            )
        end = slash + 1
    return raw_path[:end]


class DepotPrefixResolver:
    """Lazily computed, cached stream root prefix.

    The prefix is computed once, from the first path passed to
    :meth:`strip`; later paths only have that exact prefix removed.
    """

    def __init__(self, depth: int) -> None:
        self._depth: int = depth
        self._prefix: str | None = None

    @property
    def prefix(self) -> str | None:
        """The resolved prefix, or ``None`` before the first path."""
        return self._prefix

    def strip(self, raw_path: str) -> str:
        """Return *raw_path* relative to the stream root.

        Paths that do not start with the resolved prefix are returned
        unchanged.
        """
        if self._prefix is None:
            self._prefix = depot_prefix(raw_path, self._depth)
        return raw_path.removeprefix(self._prefix)
