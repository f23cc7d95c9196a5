"""Join phase: wait for every dispatched cleanup and total the space freed.

``cargo clean`` reports what it removed on standard error, for example::

    Removed 2020 files, 986.5MiB total
    Summary 12 files, 3.1KiB total      (with --dry-run)

Only the first line is looked at. The parsing lives in parse_outcome(),
which is pure and never raises, so that an unexpected line only costs
that execution's contribution.
"""

import logging
import subprocess
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from pydantic import ByteSize

from cleanrec.core.errors import CollectError, SizeParseError, format_error_chain
from cleanrec.models.execution import CleanExecution, CleanReport, DeleteMode, ExecutionOutcome
from cleanrec.models.size import ZERO, parse_size
from cleanrec.utils.formatting import print_captured_output, print_warning

logger = logging.getLogger(__name__)

DEFAULT_JOBS = 8

# Lines cargo prints when there was nothing to remove
NOTHING_REMOVED = "Removed 0 files"
NOTHING_TO_REMOVE = "Summary 0 files"

# "Removed <N> files, <SIZE> total": the size is the 4th token
_SIZE_TOKEN_INDEX = 3


def first_line(text: str) -> str:
    """Return the first line of the trimmed text, itself trimmed."""
    return text.strip().split("\n", 1)[0].strip()


def parse_outcome(line: str, dry_run: bool) -> ByteSize | None:
    """Extract the freed size from the first line of ``cargo clean`` output.

    Args:
        line: First line of the captured output.
        dry_run: Whether cargo was run with --dry-run.

    Returns:
        ZERO for the "nothing removed" line of the active mode, the
        parsed size for a "<verb> <N> files, <SIZE> total" line, or None
        if the line cannot be understood.
    """
    if line == (NOTHING_TO_REMOVE if dry_run else NOTHING_REMOVED):
        return ZERO

    tokens = line.split()
    if len(tokens) <= _SIZE_TOKEN_INDEX:
        return None

    try:
        return parse_size(tokens[_SIZE_TOKEN_INDEX])
    except SizeParseError:
        return None


def wait_for(execution: CleanExecution, timeout: float | None = None) -> ExecutionOutcome:
    """Wait for one cleanup process and read back its output.

    Args:
        execution: The execution to wait on.
        timeout: Seconds to wait before killing the process. None waits forever.

    Returns:
        ExecutionOutcome with the exit code and captured standard error.

    Raises:
        CollectError: If the process timed out or could not be waited on.
    """
    process = execution.process
    try:
        _, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        process.kill()
        process.communicate()
        msg = f"`cargo clean` in {execution.path} did not finish within {timeout}s"
        raise CollectError(msg) from e
    except OSError as e:
        msg = f"waiting for `cargo clean` in {execution.path}"
        raise CollectError(msg) from e

    return ExecutionOutcome(path=execution.path, returncode=process.returncode, output=stderr or "")


def collect(
    executions: Sequence[CleanExecution],
    mode: DeleteMode,
    *,
    verbose: bool = False,
    jobs: int = DEFAULT_JOBS,
    timeout: float | None = None,
) -> CleanReport:
    """Wait for all executions and aggregate the space they freed.

    Waiting happens on a bounded thread pool; outcomes are handled on the
    calling thread in completion order. Each execution is waited on
    exactly once.

    Args:
        executions: Executions produced by the walk.
        mode: Delete options the executions were started with.
        verbose: Echo the output of every successful execution.
        jobs: Maximum number of executions waited on concurrently.
        timeout: Per-execution wait limit in seconds, None for no limit.

    Returns:
        CleanReport holding the total and per-outcome counters.
    """
    report = CleanReport(dry_run=mode.dry_run, dispatched=len(executions))
    if not executions:
        return report

    workers = max(1, min(jobs, len(executions)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(wait_for, execution, timeout): execution for execution in executions}
        for future in as_completed(futures):
            try:
                outcome = future.result()
            except CollectError as e:
                report.wait_errors += 1
                print_warning(f"Failed to get child process output: {format_error_chain(e)}")
                continue
            _record(outcome, report, verbose=verbose)

    return report


def _record(outcome: ExecutionOutcome, report: CleanReport, *, verbose: bool) -> None:
    """Fold one finished execution into the report."""
    if not outcome.success:
        # cargo refuses some projects (old manifest format, permissions, ...)
        report.failed += 1
        logger.debug("cargo clean failed in %s (exit %d)", outcome.path, outcome.returncode)
        return

    report.succeeded += 1
    output = outcome.output.strip()
    if verbose:
        print_captured_output(outcome.path, output)

    line = first_line(output)
    size = parse_outcome(line, report.dry_run)
    if size is None:
        report.unparsable += 1
        print_warning(f"Failed to parse size of cargo clean output: {line}")
        return

    report.add(size)
