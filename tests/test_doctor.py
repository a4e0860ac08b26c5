"""Tests for the ``keyfall doctor`` command (cli/doctor.py).

Coverage:
* Individual checks return correct rows.
* Doctor returns SUCCESS when everything is present.
* Doctor returns GENERAL_ERROR and falls back to plain text without Rich.
* CLI routing dispatches to ``run_doctor``.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from keyfall.cli import exit_codes
from keyfall.cli.doctor import CheckRow


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------

class TestCheckRow:
    def test_styled_status(self) -> None:
        assert CheckRow("x", "1", "OK").styled_status() == "[green]OK[/green]"

    def test_note_is_appended(self) -> None:
        row = CheckRow("Python", "3.8.0", "FAIL", note=">=3.10 required")
        assert row.plain_status() == "FAIL (>=3.10 required)"
        assert row.styled_status() == "[red]FAIL (>=3.10 required)[/red]"
        assert row.failed

    def test_warn_is_not_failure(self) -> None:
        assert not CheckRow("rich", "unknown", "WARN").failed


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_current_interpreter_passes(self) -> None:
        from keyfall.cli.doctor import _python_version_check

        row = _python_version_check()
        assert row.label == "Python"
        assert row.status == "OK"

    @patch("keyfall.cli.doctor.MIN_PYTHON", (99, 0))
    def test_too_old(self) -> None:
        from keyfall.cli.doctor import _python_version_check

        row = _python_version_check()
        assert row.failed
        assert row.note == ">=99.0 required"


class TestRichVersionCheck:
    def test_installed(self) -> None:
        from keyfall.cli.doctor import _rich_version_check

        row = _rich_version_check()
        assert row.label == "rich"
        assert row.value != "NOT INSTALLED"
        assert row.status == "OK"

    @patch.dict("sys.modules", {"rich": None})
    def test_not_installed(self) -> None:
        from keyfall.cli.doctor import _rich_version_check

        row = _rich_version_check()
        assert row.value == "NOT INSTALLED"
        assert row.failed


class TestOsCheck:
    def test_returns_row(self) -> None:
        from keyfall.cli.doctor import _os_check

        row = _os_check()
        assert row.label == "OS"
        assert row.status == "OK"

    @patch("keyfall.cli.doctor.platform.machine", return_value="arm64")
    @patch("keyfall.cli.doctor.platform.release", return_value="23.4.0")
    @patch("keyfall.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        from keyfall.cli.doctor import _os_check

        row = _os_check()
        assert row.value == "macOS 23.4.0 (arm64)"


class TestKeyfallVersionCheck:
    def test_returns_current_version(self) -> None:
        from keyfall.cli.doctor import _keyfall_version_check
        from keyfall.version import __version__

        row = _keyfall_version_check()
        assert row.label == "keyfall"
        assert row.value == __version__


class TestSelfTestCheck:
    def test_resolves_renamed_field(self) -> None:
        from keyfall.cli.doctor import _self_test_check

        assert _self_test_check().status == "OK"

    @patch("keyfall.api.decode", return_value="fallback")
    def test_reports_wrong_result(self, _mock_decode: MagicMock) -> None:
        from keyfall.cli.doctor import _self_test_check

        row = _self_test_check()
        assert row.failed
        assert row.value == "'fallback'"


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    def test_all_pass_returns_success(self) -> None:
        from keyfall.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.SUCCESS

    @patch(
        "keyfall.cli.doctor._python_version_check",
        return_value=CheckRow("Python", "3.8.0", "FAIL", note=">=3.10 required"),
    )
    def test_failed_check_returns_general_error(self, _mock_check: MagicMock) -> None:
        from keyfall.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.GENERAL_ERROR

    @patch("keyfall.cli.doctor.platform.machine", return_value="arm64")
    @patch("keyfall.cli.doctor.platform.release", return_value="23.4.0")
    @patch("keyfall.cli.doctor.platform.system", return_value="Darwin")
    @patch.dict("sys.modules", {"rich": None, "rich.table": None})
    def test_plain_output_without_rich(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from keyfall.cli.doctor import run_doctor

        code = run_doctor()
        captured = capsys.readouterr()
        assert code == exit_codes.GENERAL_ERROR
        assert "keyfall doctor" in captured.err
        assert "macOS" in captured.err
        assert "NOT INSTALLED" in captured.err
        assert "Some checks failed." in captured.err
        assert captured.out == ""


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("keyfall.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_dispatches(self, mock_run: MagicMock) -> None:
        from keyfall.cli.app import main

        code = main(["doctor"])
        assert code == exit_codes.SUCCESS
        mock_run.assert_called_once()

    @patch("keyfall.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, mock_run: MagicMock) -> None:
        from keyfall.cli.app import main

        code = main(["doctor"])
        assert code == exit_codes.GENERAL_ERROR
