"""Runtime settings for depotscan.

Settings come from the environment and may be overridden by CLI flags:

``DEPOTSCAN_P4``
    Name or path of the ``p4`` executable (default ``p4``).
``DEPOTSCAN_STREAM_DEPTH``
    Fixed stream depth; when unset the depth is looked up from the
    current workspace.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from depotscan.exceptions import ConfigurationError

ENV_P4_EXECUTABLE = "DEPOTSCAN_P4"
ENV_STREAM_DEPTH = "DEPOTSCAN_STREAM_DEPTH"


@dataclass(frozen=True, slots=True)
class ScanSettings:
    """Resolved settings for one depotscan invocation."""

    p4_executable: str = "p4"
    stream_depth: int | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ScanSettings:
        """Build settings from *environ* (defaults to :data:`os.environ`)."""
        env = os.environ if environ is None else environ
        p4_executable = env.get(ENV_P4_EXECUTABLE, "").strip() or "p4"
        raw_depth = env.get(ENV_STREAM_DEPTH, "").strip()
        stream_depth = (
            parse_stream_depth(raw_depth, source=ENV_STREAM_DEPTH) if raw_depth else None
        )
        return cls(p4_executable=p4_executable, stream_depth=stream_depth)

    def with_overrides(
        self,
        *,
        p4_executable: str | None = None,
        stream_depth: int | None = None,
    ) -> ScanSettings:
        """Return a copy with non-``None`` overrides applied."""
        updated = self
        if p4_executable:
            updated = replace(updated, p4_executable=p4_executable)
        if stream_depth is not None:
            updated = replace(updated, stream_depth=stream_depth)
        return updated


def parse_stream_depth(raw: str, *, source: str = "stream depth") -> int:
    """Parse a positive integer stream depth.

    Raises
    ------
    ConfigurationError
        If *raw* is not a positive integer.
    """
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{source} must be a positive integer, got {raw!r}",
        ) from exc
    if value < 1:
        raise ConfigurationError(f"{source} must be a positive integer, got {raw!r}")
    return value
