"""Tests for the ``app-store-cli doctor`` command (cli/doctor.py).

Tool detection and the ic-py probe are mocked — no system dependency,
no internet.

Coverage:
* Doctor returns SUCCESS when every required tool is present.
* A missing required tool is a FAIL; a missing docker-compose a WARN.
* Individual check functions return correct tuples.
* Plain output when Rich is unavailable.
* CLI routing dispatches to ``run_doctor``.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from prometheus_cli.cli import exit_codes
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.infra.tools import TOOLS, ToolStatus
from prometheus_cli.settings import AppSettings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _found(name: str) -> ToolStatus:
    return ToolStatus(name=name, found=True, path=Path(f"/usr/bin/{name}"), install_commands=())


def _missing(name: str) -> ToolStatus:
    return ToolStatus(name=name, found=False, path=None, install_commands=(f"brew install {name}",))


def _all_found() -> list[ToolStatus]:
    return [_found(name) for name in TOOLS]


_ICPY_OK = ("ic-py", "2.0.0", "[green]OK[/green]")


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from prometheus_cli.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status or "FAIL" in status


class TestIcpyVersionCheck:
    @patch.dict("sys.modules", {"ic": None})
    def test_not_installed(self) -> None:
        from prometheus_cli.cli.doctor import _icpy_version_check

        label, value, status = _icpy_version_check()
        assert label == "ic-py"
        assert value == "NOT INSTALLED"
        assert "FAIL" in status


class TestToolCheck:
    def test_found(self) -> None:
        from prometheus_cli.cli.doctor import _tool_check

        label, value, status = _tool_check(_found("git"))
        assert label == "git"
        assert value.endswith("git")
        assert "OK" in status

    def test_missing_required_tool_fails(self) -> None:
        from prometheus_cli.cli.doctor import _tool_check

        assert "FAIL" in _tool_check(_missing("dfx"))[2]

    def test_missing_compose_warns(self) -> None:
        from prometheus_cli.cli.doctor import _tool_check

        assert "WARN" in _tool_check(_missing("docker-compose"))[2]


class TestNetworkCheck:
    def test_configured(self, ctx: CommandContext) -> None:
        from prometheus_cli.cli.doctor import _network_check

        label, value, status = _network_check(ctx)
        assert label == "Network (ic)"
        assert "icp-api.io" in value
        assert "OK" in status

    def test_unresolvable_network_warns(self, tmp_path: Path, settings: AppSettings) -> None:
        from prometheus_cli.cli.doctor import _network_check

        local = CommandContext("local", settings=settings, cwd=tmp_path)
        label, _value, status = _network_check(local)
        assert label == "Network (local)"
        assert "WARN" in status


class TestOsCheck:
    @patch("prometheus_cli.cli.doctor.platform.machine", return_value="arm64")
    @patch("prometheus_cli.cli.doctor.platform.release", return_value="23.4.0")
    @patch("prometheus_cli.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        from prometheus_cli.cli.doctor import _os_check

        _label, value, _status = _os_check()
        assert "macOS" in value
        assert "Darwin" not in value


class TestVersionCheck:
    def test_returns_current_version(self) -> None:
        from prometheus_cli.cli.doctor import _version_check
        from prometheus_cli.version import __version__

        label, value, status = _version_check()
        assert label == "prometheus-cli"
        assert value == __version__
        assert "OK" in status


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    @patch("prometheus_cli.cli.doctor._icpy_version_check", return_value=_ICPY_OK)
    @patch("prometheus_cli.cli.doctor._python_version_check", return_value=("Python", "3.12.0", "OK"))
    @patch("prometheus_cli.cli.doctor.detect_all", side_effect=_all_found)
    def test_all_pass_returns_success(
        self,
        _mock_detect: MagicMock,
        _mock_python: MagicMock,
        _mock_icpy: MagicMock,
        ctx: CommandContext,
    ) -> None:
        from prometheus_cli.cli.doctor import run_doctor

        assert run_doctor(ctx) == exit_codes.SUCCESS

    @patch("prometheus_cli.cli.doctor._icpy_version_check", return_value=_ICPY_OK)
    @patch("prometheus_cli.cli.doctor._python_version_check", return_value=("Python", "3.12.0", "OK"))
    @patch("prometheus_cli.cli.doctor.detect_all")
    def test_missing_compose_still_succeeds(
        self,
        mock_detect: MagicMock,
        _mock_python: MagicMock,
        _mock_icpy: MagicMock,
        ctx: CommandContext,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from prometheus_cli.cli.doctor import run_doctor

        mock_detect.return_value = [*_all_found()[:-1], _missing("docker-compose")]
        assert run_doctor(ctx) == exit_codes.SUCCESS
        assert "brew install docker-compose" in capsys.readouterr().err

    @patch("prometheus_cli.cli.doctor._icpy_version_check", return_value=_ICPY_OK)
    @patch("prometheus_cli.cli.doctor.detect_all")
    def test_missing_dfx_fails(
        self,
        mock_detect: MagicMock,
        _mock_icpy: MagicMock,
        ctx: CommandContext,
    ) -> None:
        from prometheus_cli.cli.doctor import run_doctor

        mock_detect.return_value = [_missing("dfx"), *_all_found()[1:]]
        assert run_doctor(ctx) == exit_codes.GENERAL_ERROR

    @patch("prometheus_cli.cli.doctor.platform.system", return_value="Darwin")
    @patch("prometheus_cli.cli.doctor._icpy_version_check", return_value=_ICPY_OK)
    @patch("prometheus_cli.cli.doctor.detect_all")
    @patch.dict("sys.modules", {"rich": None, "rich.table": None})
    def test_plain_output_without_rich(
        self,
        mock_detect: MagicMock,
        _mock_icpy: MagicMock,
        _mock_system: MagicMock,
        ctx: CommandContext,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from prometheus_cli.cli.doctor import run_doctor

        mock_detect.return_value = [_missing("dfx"), *_all_found()[1:]]
        assert run_doctor(ctx) == exit_codes.GENERAL_ERROR

        err = capsys.readouterr().err
        assert "prometheus-cli doctor" in err
        assert "macOS" in err
        assert "brew install dfx" in err
        assert "Some checks failed." in err
        assert "[red]" not in err


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("prometheus_cli.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_dispatches(self, mock_run: MagicMock, ctx: CommandContext) -> None:
        from prometheus_cli.cli.app import main

        assert main(["doctor"], context=ctx) == exit_codes.SUCCESS
        mock_run.assert_called_once_with(ctx)

    @patch("prometheus_cli.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, _mock_run: MagicMock, ctx: CommandContext) -> None:
        from prometheus_cli.cli.app import main

        assert main(["doctor"], context=ctx) == exit_codes.GENERAL_ERROR
