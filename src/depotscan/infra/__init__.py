"""Infrastructure layer — external system integration.

This layer wraps all interaction with the ``p4`` client and the
operating system.  Every raw start-up or exit failure must be caught
here and re-raised as a :class:`~depotscan.exceptions.DepotScanError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from depotscan.infra.p4_detector import P4Status, detect_p4, require_p4
from depotscan.infra.p4_stream_depth import (
    P4StreamDepthProvider,
    StaticStreamDepth,
    stream_path_depth,
)
from depotscan.infra.subprocess_runner import SubprocessCommandRunner

__all__: list[str] = [
    "P4Status",
    "P4StreamDepthProvider",
    "StaticStreamDepth",
    "SubprocessCommandRunner",
    "detect_p4",
    "require_p4",
    "stream_path_depth",
]
