"""Domain models for depotscan.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O and zero dependencies
on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DepotFile:
    """One file record parsed from tagged ``p4`` output."""

    path: str
    """Path relative to the stream root, e.g. ``Engine/foo.cpp``."""

    action: str = ""
    """Action reported by the server (``add``, ``edit``, ...), unvalidated."""

    cl: str = ""
    """Changelist identifier, kept as opaque text."""

    type: str = ""
    """File type tag (``text``, ``binary+l``, ...), opaque text."""
