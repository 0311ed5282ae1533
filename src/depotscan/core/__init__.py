"""Core / service layer — tagged-output parsing and pipeline orchestration.

Rules
-----
* No ``print()`` calls and no logging.
* No imports from ``cli`` or ``infra``.
* External commands are reached only through the protocols in
  :mod:`depotscan.core.protocols`.
"""

from depotscan.core.depot_files_service import DepotFilesService, require_tagged_output
from depotscan.core.depot_prefix import DepotPrefixResolver, depot_prefix
from depotscan.core.models import DepotFile
from depotscan.core.protocols import CommandRunner, StreamDepthProvider
from depotscan.core.sorting import sort_depot_files
from depotscan.core.ztag_parser import ZtagRecordParser, parse_tagged_line

__all__: list[str] = [
    "CommandRunner",
    "DepotFile",
    "DepotFilesService",
    "DepotPrefixResolver",
    "StreamDepthProvider",
    "ZtagRecordParser",
    "depot_prefix",
    "parse_tagged_line",
    "require_tagged_output",
    "sort_depot_files",
]
