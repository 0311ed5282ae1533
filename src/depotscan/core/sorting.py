"""Case-insensitive ordering for depot file listings.

Depot paths are compared after lowercasing only.  ``sorted`` is stable,
so paths that differ only in case keep the order the server sent them.
"""

from __future__ import annotations

from collections.abc import Iterable

from depotscan.core.models import DepotFile


def _path_key(depot_file: DepotFile) -> str:
    return depot_file.path.lower()


def sort_depot_files(files: Iterable[DepotFile]) -> list[DepotFile]:
    """Return *files* sorted by path, ignoring case."""
    return sorted(files, key=_path_key)
