"""Unit tests for the join phase and cargo clean output parsing."""

import errno
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from cleanrec.core.collector import collect, first_line, parse_outcome, wait_for
from cleanrec.core.errors import CollectError
from cleanrec.models.execution import CleanExecution, DeleteMode
from cleanrec.models.size import parse_size
from conftest import make_process

CLEAN = DeleteMode()
DRY_RUN = DeleteMode(dry_run=True)


def _execution(name: str, output: str = "", returncode: int = 0) -> CleanExecution:
    return CleanExecution(process=make_process(output, returncode), path=Path("/src") / name)


class TestFirstLine:
    """Tests for first_line."""

    def test_single_line(self) -> None:
        """A single line is returned trimmed."""
        assert first_line("   Removed 0 files  \n") == "Removed 0 files"

    def test_ignores_following_lines(self) -> None:
        """Everything after the first line is dropped."""
        text = "Summary 3 files, 12.0KiB total\nwarning: no files deleted due to --dry-run\n"
        assert first_line(text) == "Summary 3 files, 12.0KiB total"

    def test_leading_blank_lines_trimmed(self) -> None:
        """Leading blank lines are trimmed before taking the first line."""
        assert first_line("\n\n  Removed 0 files\n") == "Removed 0 files"

    def test_empty(self) -> None:
        """Empty output yields an empty line."""
        assert first_line("") == ""


class TestParseOutcome:
    """Tests for parse_outcome."""

    def test_removed_size(self) -> None:
        """The size token of a Removed line is parsed."""
        assert parse_outcome("Removed 2020 files, 986.5MiB total", False) == parse_size("986.5MiB")

    def test_summary_size_in_dry_run(self) -> None:
        """The size token of a dry-run Summary line is parsed."""
        assert parse_outcome("Summary 3 files, 1.5KiB total", True) == 1536

    def test_nothing_removed(self) -> None:
        """"Removed 0 files" contributes zero."""
        assert parse_outcome("Removed 0 files", False) == 0

    def test_nothing_to_remove_in_dry_run(self) -> None:
        """"Summary 0 files" contributes zero in dry-run mode."""
        assert parse_outcome("Summary 0 files", True) == 0

    def test_zero_patterns_are_mode_specific(self) -> None:
        """Each zero line is only recognized in its own mode."""
        assert parse_outcome("Summary 0 files", False) is None
        assert parse_outcome("Removed 0 files", True) is None

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "Removed 5 files",
            "Removed 5 files, lots total",
            "Removed 5 files, 1.2MiB) total",
            "Removed 5 files, 8bit total",
            "Removed 5 files, 3MiB, total",
            "error: could not find `Cargo.toml` in `/src` or any parent directory",
            "warning: nothing here",
        ],
    )
    def test_unparsable_lines(self, line: str) -> None:
        """Unrecognized lines yield None instead of raising."""
        assert parse_outcome(line, False) is None


class TestWaitFor:
    """Tests for wait_for."""

    def test_returns_outcome(self) -> None:
        """A finished process yields its exit code and output."""
        execution = _execution("a", "Removed 0 files\n", 0)

        outcome = wait_for(execution)

        assert outcome.path == execution.path
        assert outcome.returncode == 0
        assert outcome.output == "Removed 0 files\n"
        assert outcome.success is True

    def test_passes_timeout(self) -> None:
        """The timeout is forwarded to communicate."""
        execution = _execution("a")

        wait_for(execution, timeout=2.5)

        execution.process.communicate.assert_called_once_with(timeout=2.5)

    def test_missing_stderr_is_empty_output(self) -> None:
        """A process without captured stderr yields empty output."""
        execution = _execution("a")
        execution.process.communicate.return_value = (None, None)

        assert wait_for(execution).output == ""

    def test_timeout_kills_process(self) -> None:
        """A process exceeding the timeout is killed and reaped."""
        execution = _execution("slow")
        execution.process.communicate.side_effect = [
            subprocess.TimeoutExpired(cmd=["cargo", "clean"], timeout=1.0),
            (None, ""),
        ]

        with pytest.raises(CollectError, match="did not finish within 1.0s"):
            wait_for(execution, timeout=1.0)

        execution.process.kill.assert_called_once()
        assert execution.process.communicate.call_count == 2

    def test_os_error_raises_collect_error(self) -> None:
        """An OS failure while waiting raises CollectError with its cause."""
        execution = _execution("a")
        execution.process.communicate.side_effect = OSError(errno.ECHILD, "No child processes")

        with pytest.raises(CollectError) as exc_info:
            wait_for(execution)

        assert isinstance(exc_info.value.__cause__, OSError)


class TestCollect:
    """Tests for collect."""

    def test_no_executions(self) -> None:
        """Nothing dispatched yields a zero total."""
        report = collect([], CLEAN)

        assert report.total == 0
        assert report.dispatched == 0
        assert report.summary_line == "Total space saved: 0B"

    @patch("cleanrec.core.collector.print_warning")
    def test_sums_parsed_sizes(self, mock_warning: MagicMock) -> None:
        """Sizes of all successful executions are added up."""
        executions = [
            _execution("a", "Removed 5 files, 1.2MiB total\n"),
            _execution("b", "Removed 2020 files, 986.5MiB total\n"),
            _execution("c", "Removed 0 files\n"),
        ]

        report = collect(executions, CLEAN)

        assert report.total == parse_size("1.2MiB") + parse_size("986.5MiB")
        assert report.dispatched == 3
        assert report.succeeded == 3
        mock_warning.assert_not_called()

    @patch("cleanrec.core.collector.print_warning")
    def test_failed_executions_ignored_silently(self, mock_warning: MagicMock) -> None:
        """Unsuccessful executions contribute nothing and print nothing."""
        executions = [
            _execution("bad", "error: failed to parse manifest\n", 101),
            _execution("good", "Removed 5 files, 1.2MiB total\n"),
        ]

        report = collect(executions, CLEAN)

        assert report.summary_line == "Total space saved: 1.2MiB"
        assert report.failed == 1
        mock_warning.assert_not_called()

    @patch("cleanrec.core.collector.print_warning")
    def test_unparsable_output_warns_once(self, mock_warning: MagicMock) -> None:
        """Unparsable output warns once per execution and contributes zero."""
        executions = [
            _execution("odd", "Removed 5 files, plenty total\nmore\n"),
            _execution("good", "Removed 1 files, 2.0KiB total\n"),
        ]

        report = collect(executions, CLEAN)

        assert report.total == 2048
        assert report.unparsable == 1
        mock_warning.assert_called_once_with(
            "Failed to parse size of cargo clean output: Removed 5 files, plenty total"
        )

    @patch("cleanrec.core.collector.print_warning")
    def test_size_with_trailing_characters_warns(self, mock_warning: MagicMock) -> None:
        """A size token with trailing characters is unparsable, not truncated."""
        report = collect([_execution("odd", "Removed 5 files, 1.2MiB) total\n")], CLEAN)

        assert report.total == 0
        assert report.unparsable == 1
        mock_warning.assert_called_once_with(
            "Failed to parse size of cargo clean output: Removed 5 files, 1.2MiB) total"
        )

    @patch("cleanrec.core.collector.print_warning")
    def test_dry_run_summary(self, mock_warning: MagicMock) -> None:
        """Dry-run zero lines contribute zero and use the dry-run wording."""
        report = collect([_execution("a", "Summary 0 files\n")], DRY_RUN)

        assert report.summary_line == "Total space that will be saved: 0B"
        mock_warning.assert_not_called()

    @patch("cleanrec.core.collector.print_warning")
    def test_wait_failure_warns(self, mock_warning: MagicMock) -> None:
        """A process that cannot be waited on warns and contributes zero."""
        broken = _execution("broken")
        broken.process.communicate.side_effect = OSError(errno.ECHILD, "No child processes")
        good = _execution("good", "Removed 1 files, 1.0KiB total\n")

        report = collect([broken, good], CLEAN)

        assert report.total == 1024
        assert report.wait_errors == 1
        mock_warning.assert_called_once()
        assert mock_warning.call_args[0][0].startswith("Failed to get child process output: ")

    def test_each_execution_waited_once(self) -> None:
        """Every execution is waited on exactly once."""
        executions = [_execution(str(i), "Removed 0 files") for i in range(20)]

        collect(executions, CLEAN, jobs=3)

        for execution in executions:
            execution.process.communicate.assert_called_once()

    def test_total_independent_of_order(self) -> None:
        """Reordering the executions does not change the total."""
        outputs = [
            "Removed 5 files, 1.2MiB total",
            "Removed 9 files, 3.5KiB total",
            "Removed 2020 files, 986.5MiB total",
        ]
        forward = collect([_execution(str(i), o) for i, o in enumerate(outputs)], CLEAN)
        backward = collect([_execution(str(i), o) for i, o in enumerate(reversed(outputs))], CLEAN)

        assert forward.total == backward.total

    @patch("cleanrec.core.collector.print_captured_output")
    def test_verbose_echoes_output(self, mock_echo: MagicMock) -> None:
        """Verbose mode echoes the trimmed output of successful executions."""
        execution = _execution("a", "  Removed 0 files\n\n")
        failed = _execution("b", "error\n", 1)

        collect([execution, failed], CLEAN, verbose=True)

        mock_echo.assert_called_once_with(execution.path, "Removed 0 files")

    @patch("cleanrec.core.collector.print_captured_output")
    def test_quiet_by_default(self, mock_echo: MagicMock) -> None:
        """Outputs are not echoed unless verbose is set."""
        collect([_execution("a", "Removed 0 files")], CLEAN)

        mock_echo.assert_not_called()

    def test_timeout_forwarded(self) -> None:
        """The per-execution timeout reaches communicate."""
        execution = _execution("a", "Removed 0 files")

        collect([execution], CLEAN, timeout=30.0)

        execution.process.communicate.assert_called_once_with(timeout=30.0)
