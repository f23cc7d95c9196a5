"""Domain models for dispatched cleanups and their aggregated result.

This module defines the delete options shared by every dispatch, the
handle pairing a live ``cargo clean`` process with its project, the
outcome read back from it, and the run-wide report.
"""

import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ByteSize

from cleanrec.models.size import ZERO, format_size


@dataclass(frozen=True, slots=True)
class DeleteMode:
    """Options forwarded to every ``cargo clean`` invocation.

    Attributes:
        doc: Delete documentation artifacts (``--doc``).
        release: Delete release artifacts (``--release``).
        dry_run: Only report what would be deleted (``--dry-run``).
    """

    doc: bool = False
    release: bool = False
    dry_run: bool = False

    def clean_args(self) -> list[str]:
        """Build the ``cargo clean`` flags for this mode.

        Returns:
            Flags in the order --release, --doc, --dry-run; each one is
            present only if its option is set.
        """
        args: list[str] = []
        if self.release:
            args.append("--release")
        if self.doc:
            args.append("--doc")
        if self.dry_run:
            args.append("--dry-run")
        return args


@dataclass(slots=True)
class CleanExecution:
    """A started ``cargo clean`` process and the project it runs in.

    Created by the dispatcher and consumed exactly once by the collector.

    Attributes:
        process: The live child process (stderr piped, text mode).
        path: Project root the process was started in.
    """

    process: subprocess.Popen[str]
    path: Path


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """What a finished cleanup process left behind.

    Attributes:
        path: Project root the process ran in.
        returncode: Exit code of the process.
        output: Captured standard error text.
    """

    path: Path
    returncode: int
    output: str

    @property
    def success(self) -> bool:
        """Check if the process exited successfully."""
        return self.returncode == 0


@dataclass(slots=True)
class CleanReport:
    """Aggregated result of a whole run.

    The total only ever grows; it is updated once per collected
    execution.

    Attributes:
        dry_run: Whether the run only reported what would be deleted.
        total: Sum of all successfully parsed sizes.
        dispatched: Number of executions collected.
        succeeded: Executions that exited successfully.
        failed: Executions that exited unsuccessfully (ignored).
        unparsable: Successful executions whose output could not be parsed.
        wait_errors: Executions whose outcome could not be retrieved.
    """

    dry_run: bool = False
    total: ByteSize = field(default=ZERO)
    dispatched: int = 0
    succeeded: int = 0
    failed: int = 0
    unparsable: int = 0
    wait_errors: int = 0

    def add(self, size: int) -> None:
        """Add a reclaimed size to the total."""
        if size < 0:
            msg = f"Reclaimed size cannot be negative, got {size}"
            raise ValueError(msg)
        self.total = ByteSize(self.total + size)

    @property
    def total_human(self) -> str:
        """Return the total as a human-readable string."""
        return format_size(self.total)

    @property
    def summary_line(self) -> str:
        """Return the final summary line for this run."""
        if self.dry_run:
            return f"Total space that will be saved: {self.total_human}"
        return f"Total space saved: {self.total_human}"
