"""Tests for the CLI layer (cli/app.py, cli/render.py).

Services are replaced at the ``build_service`` seam — no processes run.

Coverage:
* Routing, ``--help`` / ``--version``.
* p4 command construction for ``files`` / ``opened`` / ``run``.
* Settings precedence (flags over environment).
* JSON and table rendering.
* The ``cli()`` error boundary and exit codes.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from depotscan.cli import app as app_module
from depotscan.cli import exit_codes
from depotscan.cli.app import build_service, cli, main
from depotscan.cli.render import format_json, format_plain_table
from depotscan.config import ENV_STREAM_DEPTH, ScanSettings
from depotscan.core.models import DepotFile
from depotscan.exceptions import (
    CommandExecutionError,
    ConfigurationError,
    ProtocolError,
)
from depotscan.infra.p4_stream_depth import P4StreamDepthProvider, StaticStreamDepth

FILES = [
    DepotFile(path="Content/x.uasset", action="add"),
    DepotFile(path="Engine/a.cpp", action="edit", cl="100", type="text"),
]


@pytest.fixture
def fake_service(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace service construction and capture the settings used."""
    service = MagicMock()
    service.run_and_parse.return_value = list(FILES)
    factory = MagicMock(return_value=service)
    monkeypatch.setattr(app_module, "build_service", factory)
    monkeypatch.delenv(ENV_STREAM_DEPTH, raising=False)
    service.factory = factory
    return service


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class TestRouting:
    def test_no_args_returns_success(self) -> None:
        assert main([]) == exit_codes.SUCCESS

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_help_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    @patch("depotscan.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_routes(self, mock_doctor: MagicMock) -> None:
        assert main(["doctor", "--p4", "p4.exe"]) == exit_codes.SUCCESS
        settings = mock_doctor.call_args.args[0]
        assert settings.p4_executable == "p4.exe"

    def test_bad_stream_depth_flag_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["files", "--stream-depth", "0", "//depot/..."])
        assert exc_info.value.code == 2

    def test_files_requires_filespec(self) -> None:
        with pytest.raises(SystemExit):
            main(["files"])


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------

class TestCommands:
    def test_files(self, fake_service: MagicMock) -> None:
        assert main(["files", "//depot/main/...", "--json"]) == exit_codes.SUCCESS
        fake_service.run_and_parse.assert_called_once_with("p4 -z tag files //depot/main/...")

    def test_files_quotes_specs(self, fake_service: MagicMock) -> None:
        main(["files", "//depot/main/My Docs/...", "--json"])
        fake_service.run_and_parse.assert_called_once_with(
            "p4 -z tag files '//depot/main/My Docs/...'"
        )

    def test_opened_with_change(self, fake_service: MagicMock) -> None:
        main(["opened", "-c", "1234", "--json"])
        fake_service.run_and_parse.assert_called_once_with("p4 -z tag opened -c 1234")

    def test_opened_default(self, fake_service: MagicMock) -> None:
        main(["opened", "--json"])
        fake_service.run_and_parse.assert_called_once_with("p4 -z tag opened")

    def test_run_passes_command_through(self, fake_service: MagicMock) -> None:
        main(["run", "p4 -ztag fstat //depot/...", "--json"])
        fake_service.run_and_parse.assert_called_once_with("p4 -ztag fstat //depot/...")

    def test_custom_p4_executable(self, fake_service: MagicMock) -> None:
        main(["files", "--p4", "/opt/p4", "//depot/...", "--json"])
        fake_service.run_and_parse.assert_called_once_with("/opt/p4 -z tag files //depot/...")


# ---------------------------------------------------------------------------
# Settings precedence
# ---------------------------------------------------------------------------

class TestSettings:
    def test_flag_overrides_environment(
        self, fake_service: MagicMock, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv(ENV_STREAM_DEPTH, "1")
        main(["files", "--stream-depth", "3", "//depot/...", "--json"])
        settings = fake_service.factory.call_args.args[0]
        assert settings.stream_depth == 3

    def test_environment_used_without_flag(
        self, fake_service: MagicMock, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv(ENV_STREAM_DEPTH, "2")
        main(["files", "//depot/...", "--json"])
        assert fake_service.factory.call_args.args[0].stream_depth == 2


class TestBuildService:
    def test_static_depth_when_configured(self) -> None:
        service = build_service(ScanSettings(stream_depth=2))
        assert isinstance(service._depth_provider, StaticStreamDepth)

    def test_workspace_lookup_otherwise(self) -> None:
        service = build_service(ScanSettings())
        assert isinstance(service._depth_provider, P4StreamDepthProvider)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRendering:
    def test_json_on_stdout(
        self, fake_service: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["files", "//depot/...", "--json"])
        payload = json.loads(capsys.readouterr().out)
        assert payload == [
            {"path": "Content/x.uasset", "action": "add", "cl": "", "type": ""},
            {"path": "Engine/a.cpp", "action": "edit", "cl": "100", "type": "text"},
        ]

    def test_table_on_stderr(
        self, fake_service: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["files", "//depot/..."])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Engine/a.cpp" in captured.err
        assert "2 file(s)" in captured.err

    def test_empty_listing(
        self, fake_service: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        fake_service.run_and_parse.return_value = []
        main(["files", "//depot/..."])
        assert "No files matched" in capsys.readouterr().err

    def test_format_json_empty(self) -> None:
        assert json.loads(format_json([])) == []

    def test_plain_table(self) -> None:
        lines = format_plain_table(FILES).splitlines()
        assert lines[0].split() == ["Path", "Action", "CL", "Type"]
        assert set(lines[1].replace(" ", "")) == {"-"}
        assert lines[2].split() == ["Content/x.uasset", "add", "—", "—"]
        assert lines[3].split() == ["Engine/a.cpp", "edit", "100", "text"]


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _run_cli(self, monkeypatch: pytest.MonkeyPatch, error: BaseException) -> int:
        def _raise() -> int:
            raise error

        monkeypatch.setattr(app_module, "main", _raise)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        return int(exc_info.value.code or 0)

    def test_success_exit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "main", lambda: exit_codes.SUCCESS)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.SUCCESS

    def test_known_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run_cli(
            monkeypatch,
            ProtocolError('expected "... <tag>", but got: [garbage]', hint="check output"),
        )
        assert code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "[garbage]" in err
        assert "check output" in err

    def test_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        code = self._run_cli(monkeypatch, ConfigurationError('missing "-z tag"'))
        assert code == exit_codes.GENERAL_ERROR

    def test_command_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        code = self._run_cli(monkeypatch, CommandExecutionError("exit 1", returncode=1))
        assert code == exit_codes.COMMAND_FAILED

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert self._run_cli(monkeypatch, KeyboardInterrupt()) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run_cli(monkeypatch, RuntimeError("kaboom"))
        assert code == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError: kaboom" in capsys.readouterr().err
