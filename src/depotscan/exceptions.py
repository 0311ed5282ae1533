"""Custom exception hierarchy for depotscan.

All exceptions that cross layer boundaries must inherit from
:class:`DepotScanError`.  Raw ``OSError`` / ``subprocess`` failures
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
DepotScanError
├── ConfigurationError
├── ProtocolError
│   └── DepotPrefixError
├── StreamReadError
├── CommandExecutionError
├── StreamDepthError
└── EnvironmentError
    └── P4NotFoundError
"""

from __future__ import annotations


class DepotScanError(Exception):
    """Base exception for all depotscan errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(DepotScanError):
    """Raised before execution when a command or setting is unusable."""


# --- Tagged-output protocol ------------------------------------------------

class ProtocolError(DepotScanError):
    """Raised when the tagged output stream contains a malformed line."""

    def __init__(
        self,
        message: str,
        *,
        line: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.line: str = line
        """The offending text, verbatim after whitespace trimming."""


class DepotPrefixError(ProtocolError):
    """Raised when a depot path cannot yield a stream root prefix."""


class StreamReadError(DepotScanError):
    """Raised when reading the command output stream fails."""


# --- Command execution -----------------------------------------------------

class CommandExecutionError(DepotScanError):
    """Raised when the external command fails to start or exits non-zero."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.returncode: int | None = returncode


class StreamDepthError(DepotScanError):
    """Raised when the stream depth of the current workspace is unknown."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(DepotScanError):
    """Raised when a required runtime dependency is not available."""


class P4NotFoundError(EnvironmentError):
    """Raised when the p4 executable cannot be located on the system PATH."""


def append_p4_login_suggestion(hint: str) -> str:
    """Append Perforce login guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "If the server requires a ticket, log in first:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    p4 login",
        )
    )
