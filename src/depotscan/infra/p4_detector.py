"""Infrastructure: p4 client detection and platform guidance.

This module is responsible for locating the Perforce command-line
client on the system PATH and providing platform-specific installation
guidance when it is missing.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from depotscan.exceptions import P4NotFoundError


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class P4Status:
    """Result of a p4 detection probe.

    Attributes
    ----------
    found : bool
        Whether p4 was located on PATH.
    path : Path | None
        Absolute path to the p4 binary, or ``None``.
    version_hint : str
        Human-readable status string (e.g. ``"found at …"`` or ``"not found"``).
    install_commands : tuple[str, ...]
        Suggested ways of installing p4 on the current platform.  Empty
        when p4 is already present.
    """

    found: bool
    path: Path | None
    version_hint: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_p4(executable: str = "p4") -> P4Status:
    """Probe the system for a p4 binary.

    Returns a :class:`P4Status` regardless of whether p4 is present —
    the caller decides whether to abort or merely warn.
    """
    result = shutil.which(executable)

    if result is not None:
        resolved = Path(result).resolve()
        return P4Status(
            found=True,
            path=resolved,
            version_hint=f"found at {resolved}",
            install_commands=(),
        )

    return P4Status(
        found=False,
        path=None,
        version_hint="not found",
        install_commands=_platform_install_commands(),
    )


def require_p4(executable: str = "p4") -> Path:
    """Locate p4 or raise :class:`P4NotFoundError`."""
    status = detect_p4(executable)
    if not status.found or status.path is None:
        hint_lines: list[str] = []
        if status.install_commands:
            hint_lines.append("Install the Perforce client using one of:")
            hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise P4NotFoundError(
            f"{executable} is not installed or not on PATH.",
            hint="\n".join(hint_lines) if hint_lines else None,
        )
    return status.path


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands() -> tuple[str, ...]:
    """Return install suggestions appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install Perforce.P4V",
            "choco install p4",
        )
    if system == "linux":
        return (
            "sudo apt install helix-cli  (after adding package.perforce.com)",
            "sudo dnf install helix-cli  (after adding package.perforce.com)",
        )
    if system == "darwin":
        return ("brew install --cask perforce",)
    return ("Download p4 from https://www.perforce.com/downloads/helix-command-line-client-p4",)
