"""Shared pytest fixtures and configuration for the depotscan test suite.

Guidelines
----------
* No Perforce server and no ``p4`` binary in any test.
* Commands are faked at the :class:`CommandRunner` boundary; real child
  processes only ever run ``sys.executable``.
* Tests must not depend on OS state.
"""

from __future__ import annotations

from typing import BinaryIO

import pytest


class ScriptedRunner:
    """``CommandRunner`` that writes canned output, then optionally fails."""

    def __init__(
        self,
        output: bytes | str = b"",
        *,
        error: Exception | None = None,
    ) -> None:
        self.output: bytes = output.encode("utf-8") if isinstance(output, str) else output
        self.error: Exception | None = error
        self.calls: list[str] = []

    def run(self, command: str, stdout: BinaryIO) -> None:
        self.calls.append(command)
        stdout.write(self.output)
        stdout.flush()
        if self.error is not None:
            raise self.error


class FixedDepth:
    """``StreamDepthProvider`` returning a fixed value and counting calls."""

    def __init__(self, depth: int) -> None:
        self.depth = depth
        self.calls = 0

    def stream_depth(self) -> int:
        self.calls += 1
        return self.depth


def tagged(*records: dict[str, str]) -> str:
    """Render records as ``p4 -z tag`` output, each followed by a blank line."""
    chunks: list[str] = []
    for record in records:
        chunks.extend(f"... {tag} {value}\n" for tag, value in record.items())
        chunks.append("\n")
    return "".join(chunks)


@pytest.fixture
def e2e_output() -> str:
    return (
        "... depotFile //depot/Content/x.uasset\n"
        "... action add\n"
        "\n"
        "... depotFile //depot/Engine/a.cpp\n"
        "... action edit\n"
        "... change 100\n"
        "... type text\n"
        "\n"
    )
