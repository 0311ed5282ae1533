"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol


class CommandRunner(Protocol):
    """Contract for command execution backends.

    Any object that implements :meth:`run` with the correct signature
    satisfies this protocol structurally (no explicit inheritance
    required).
    """

    def run(self, command: str, stdout: BinaryIO) -> None:
        """Run *command* to completion, streaming its stdout into *stdout*.

        Implementations must not close *stdout*; the caller owns it.

        Raises
        ------
        CommandExecutionError
            When the command cannot start or exits with a failure status.
        OSError
            When writing to *stdout* fails (e.g. the reader went away).
        """
        ...  # pragma: no cover


class StreamDepthProvider(Protocol):
    """Contract for stream depth lookups.

    The depth is the number of leading path segments after ``//`` that
    form the stream root (``//depot/main`` has depth 2).
    """

    def stream_depth(self) -> int:
        """Return the stream depth for the current context.

        Raises
        ------
        StreamDepthError
            When the depth cannot be determined.
        """
        ...  # pragma: no cover
