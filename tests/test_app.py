"""End-to-end tests for the CLI (cli/app.py, cli/session.py).

``shutil.which`` and ``subprocess.run`` are mocked at the infra
boundary, so the full dispatch path runs without toggl-track,
zendesk-cli or a clipboard.

Coverage:
* ``start`` validation failures exit 1 before any subprocess.
* ``--no-validate`` never invokes zendesk-cli.
* Ticket lookup outcomes and missing dependencies.
* ``stop`` summary, clipboard handling and partial summaries.
* Passthrough exit codes, config advisory, debug tracing.
* Error boundary exit codes.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from task_tracker.cli import exit_codes
from task_tracker.cli.app import cli, main
from task_tracker.exceptions import ClipboardError, ParseError

WHICH = "task_tracker.infra.dependency_gate.shutil.which"
RUN = "task_tracker.infra.process.subprocess.run"
COPY = "task_tracker.cli.session.copy_to_clipboard"

MANILA_CONFIG = (
    'TICKET_PREFIX="#"\n'
    'DEFAULT_SUBJECT="Ticket Update"\n'
    'SUPPORT_NAME="John Smith"\n'
    'ZENDESK_BASE_URL="https://company.zendesk.com"\n'
    'TIMEZONE="Asia/Manila"\n'
    "COPY_TO_CLIPBOARD=true\n"
)

STOP_REPORT = (
    "Stopped: [#12345] Fix login bug\n"
    "Start: 2024-01-15T12:00:00\n"
    "Duration: 2h 30m\n"
)

SUMMARY_LINE = (
    "[2h 30m - 2024-01-15 14:30:00, John Smith]"
    " - https://company.zendesk.com/agent/tickets/12345 - Fix login bug"
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _exit_code(argv: list[str]) -> Any:
    with pytest.raises(SystemExit) as exc_info:
        cli(argv)
    return exc_info.value.code


def _which_only(*present: str) -> Callable[[str], str | None]:
    return lambda name: f"/usr/bin/{name}" if name in present else None


def _fake_run(
    *,
    ticket_stdout: str = "Ticket 12345: Login broken\n",
    ticket_code: int = 0,
    toggl_stdout: str | None = None,
    toggl_code: int = 0,
) -> MagicMock:
    def run(command: Sequence[str], **_kwargs: Any) -> subprocess.CompletedProcess[str]:
        if command[0] == "zendesk-cli":
            return subprocess.CompletedProcess(command, ticket_code, stdout=ticket_stdout)
        return subprocess.CompletedProcess(command, toggl_code, stdout=toggl_stdout)

    return MagicMock(side_effect=run)


def _commands(mock_run: MagicMock) -> list[list[str]]:
    return [c.args[0] for c in mock_run.call_args_list]


@pytest.fixture()
def manila_config(work_dir: Path) -> Path:
    path = work_dir / ".tasktrackerrc"
    path.write_text(MANILA_CONFIG, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# start — argument failures
# ---------------------------------------------------------------------------

class TestStartValidation:
    @patch(RUN)
    def test_non_numeric_exits_before_subprocess(
        self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _exit_code(["start", "abc"]) == exit_codes.GENERAL_ERROR
        mock_run.assert_not_called()
        assert "numeric" in capsys.readouterr().err

    @patch(RUN)
    def test_missing_ticket_exits_one(
        self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _exit_code(["start"]) == exit_codes.GENERAL_ERROR
        mock_run.assert_not_called()
        err = capsys.readouterr().err
        assert "ticket ID is required" in err
        assert "usage: task-tracker start" in err

    @patch(RUN)
    def test_unknown_flag_shows_usage(
        self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _exit_code(["start", "1", "--bogus"]) == exit_codes.GENERAL_ERROR
        mock_run.assert_not_called()
        assert "usage: task-tracker start" in capsys.readouterr().err

    def test_main_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            main(["start", "abc"])

    @patch(RUN)
    def test_start_help_has_no_side_effects(
        self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _exit_code(["start", "--help"]) == exit_codes.SUCCESS
        mock_run.assert_not_called()
        assert "--no-validate" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# start — execution
# ---------------------------------------------------------------------------

class TestStart:
    def test_no_validate_skips_ticket_client(self, manila_config: Path) -> None:
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track", "zendesk-cli")), \
                patch(RUN, mock_run):
            assert main(["start", "12345", "--no-validate"]) == exit_codes.SUCCESS

        assert _commands(mock_run) == [
            ["toggl-track", "start", "[#12345] Ticket Update"],
        ]

    def test_no_validate_does_not_need_zendesk(self, manila_config: Path) -> None:
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            assert main(["start", "12345", "--no-validate"]) == exit_codes.SUCCESS

    def test_validates_then_starts(self, manila_config: Path) -> None:
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track", "zendesk-cli")), \
                patch(RUN, mock_run):
            code = main(["start", "12345", "Fix login bug", "--tags", "support", "--project", "9"])

        assert code == exit_codes.SUCCESS
        assert _commands(mock_run) == [
            ["zendesk-cli", "show", "12345"],
            [
                "toggl-track", "start", "[#12345] Fix login bug",
                "--tags", "support", "--project", "9",
            ],
        ]

    def test_ticket_not_found(self, manila_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        mock_run = _fake_run(ticket_code=1, ticket_stdout="")
        with patch(WHICH, side_effect=_which_only("toggl-track", "zendesk-cli")), \
                patch(RUN, mock_run):
            assert _exit_code(["start", "999"]) == exit_codes.GENERAL_ERROR

        assert _commands(mock_run) == [["zendesk-cli", "show", "999"]]
        assert "not found" in capsys.readouterr().err

    def test_validator_unavailable(self, manila_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            assert _exit_code(["start", "12345"]) == exit_codes.GENERAL_ERROR

        mock_run.assert_not_called()
        assert "--no-validate" in capsys.readouterr().err

    def test_time_tracker_missing(self, manila_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
        mock_run = _fake_run()
        with patch(WHICH, return_value=None), patch(RUN, mock_run):
            assert _exit_code(["start", "12345", "--no-validate"]) == exit_codes.GENERAL_ERROR

        mock_run.assert_not_called()
        assert "toggl-track" in capsys.readouterr().err

    def test_time_tracker_failure_code_forwarded(self, manila_config: Path) -> None:
        mock_run = _fake_run(toggl_code=4)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            assert _exit_code(["start", "12345", "--no-validate"]) == 4


# ---------------------------------------------------------------------------
# stop
# ---------------------------------------------------------------------------

class TestStop:
    def test_full_summary_printed_and_copied(
        self, manila_config: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_run = _fake_run(toggl_stdout=STOP_REPORT)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run), \
                patch(COPY, return_value=("pbcopy",)) as mock_copy:
            assert main(["stop"]) == exit_codes.SUCCESS

        out = capsys.readouterr().out
        assert "Stopped: [#12345] Fix login bug" in out
        assert SUMMARY_LINE in out
        mock_copy.assert_called_once_with(SUMMARY_LINE)
        assert _commands(mock_run) == [["toggl-track", "stop"]]

    def test_coloured_report_copies_correct_summary(self, manila_config: Path) -> None:
        coloured = "\x1b[0;32m" + STOP_REPORT.replace("\n", "\x1b[0m\n", 1)
        mock_run = _fake_run(toggl_stdout=coloured)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run), \
                patch(COPY, return_value=("pbcopy",)) as mock_copy:
            assert main(["stop"]) == exit_codes.SUCCESS
        mock_copy.assert_called_once_with(SUMMARY_LINE)

    def test_clipboard_disabled(self, work_dir: Path) -> None:
        (work_dir / ".tasktrackerrc").write_text(
            MANILA_CONFIG.replace("COPY_TO_CLIPBOARD=true", "COPY_TO_CLIPBOARD=false"),
            encoding="utf-8",
        )
        mock_run = _fake_run(toggl_stdout=STOP_REPORT)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run), \
                patch(COPY) as mock_copy:
            assert main(["stop"]) == exit_codes.SUCCESS
        mock_copy.assert_not_called()

    def test_clipboard_failure_is_warning(
        self, manila_config: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_run = _fake_run(toggl_stdout=STOP_REPORT)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run), \
                patch(COPY, side_effect=ClipboardError("No clipboard utility found.")):
            assert _exit_code(["stop"]) == exit_codes.SUCCESS

        captured = capsys.readouterr()
        assert SUMMARY_LINE in captured.out
        assert "Warning" in captured.err

    def test_unparseable_report_still_succeeds(
        self, manila_config: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_run = _fake_run(toggl_stdout="Done.\n")
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run), \
                patch(COPY) as mock_copy:
            assert _exit_code(["stop"]) == exit_codes.SUCCESS

        captured = capsys.readouterr()
        assert "[? - ?, John Smith] - ? - ?" in captured.out
        assert "Warning" in captured.err
        mock_copy.assert_not_called()

    def test_stop_failure_forwards_code(self, manila_config: Path) -> None:
        mock_run = _fake_run(toggl_stdout="No running entry\n", toggl_code=2)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run), \
                patch(COPY) as mock_copy:
            assert _exit_code(["stop"]) == 2
        mock_copy.assert_not_called()

    def test_stop_requires_time_tracker(self) -> None:
        with patch(WHICH, return_value=None), patch(RUN) as mock_run:
            assert _exit_code(["stop"]) == exit_codes.GENERAL_ERROR
        mock_run.assert_not_called()


# ---------------------------------------------------------------------------
# Passthrough
# ---------------------------------------------------------------------------

class TestPassthrough:
    def test_status_forwarded(self) -> None:
        mock_run = _fake_run(toggl_code=0)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            assert main(["status"]) == exit_codes.SUCCESS
        assert _commands(mock_run) == [["toggl-track", "status"]]

    def test_opaque_command_verbatim(self) -> None:
        mock_run = _fake_run(toggl_code=0)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            main(["list", "--since", "today"])
        assert _commands(mock_run) == [["toggl-track", "list", "--since", "today"]]

    def test_exit_code_unchanged(self) -> None:
        mock_run = _fake_run(toggl_code=7)
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            assert _exit_code(["whatever"]) == 7

    def test_missing_time_tracker(self) -> None:
        with patch(WHICH, return_value=None), patch(RUN) as mock_run:
            assert _exit_code(["invalid-command"]) == exit_codes.GENERAL_ERROR
        mock_run.assert_not_called()

    def test_unlaunchable_time_tracker_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch(WHICH, side_effect=_which_only("toggl-track")), \
                patch(RUN, side_effect=PermissionError(13, "Permission denied")):
            assert _exit_code(["status"]) == exit_codes.GENERAL_ERROR
        assert "could not be started" in capsys.readouterr().err

    def test_passthrough_does_not_read_config(
        self, work_dir: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            main(["status"])
        assert "No configuration file" not in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Configuration and debug tracing
# ---------------------------------------------------------------------------

class TestConfigurationUse:
    def test_no_config_uses_defaults_with_advisory(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            assert main(["start", "12345", "--no-validate"]) == exit_codes.SUCCESS

        assert _commands(mock_run) == [["toggl-track", "start", "[#12345] Ticket Update"]]
        err = capsys.readouterr().err
        assert err.count("No configuration file") == 1
        assert "init" in err

    def test_home_config_used(self, home_dir: Path) -> None:
        (home_dir / ".tasktrackerrc").write_text('TICKET_PREFIX="ZD-"\n', encoding="utf-8")
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            main(["start", "5", "Hello", "--no-validate"])
        assert _commands(mock_run) == [["toggl-track", "start", "[ZD-5] Hello"]]

    def test_xdg_config_used(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        xdg = tmp_path / "xdg"
        (xdg / "task-tracker").mkdir(parents=True)
        (xdg / "task-tracker" / "config").write_text("TICKET_SUFFIX=-x\n", encoding="utf-8")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            main(["start", "5", "Hello", "--no-validate"])
        assert _commands(mock_run) == [["toggl-track", "start", "[#5-x] Hello"]]

    def test_debug_traces_config_and_commands(
        self,
        manila_config: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("TASK_TRACKER_DEBUG", "1")
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            main(["start", "12345", "--no-validate"])

        err = capsys.readouterr().err
        assert "debug:" in err
        assert ".tasktrackerrc" in err
        assert "running: toggl-track start" in err

    def test_debug_off_by_default(
        self, manila_config: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_run = _fake_run()
        with patch(WHICH, side_effect=_which_only("toggl-track")), patch(RUN, mock_run):
            main(["start", "12345", "--no-validate"])
        assert "debug:" not in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_keyboard_interrupt(self) -> None:
        with patch("task_tracker.cli.app.main", side_effect=KeyboardInterrupt):
            assert _exit_code([]) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("task_tracker.cli.app.main", side_effect=RuntimeError("kaboom")):
            assert _exit_code([]) == exit_codes.UNEXPECTED_ERROR
        assert "kaboom" in capsys.readouterr().err

    def test_success_exits_zero(self) -> None:
        assert _exit_code(["--version"]) == exit_codes.SUCCESS
