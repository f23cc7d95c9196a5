"""Depth-bounded tree walk that dispatches ``cargo clean`` per project.

The walk is single-threaded and uses an explicit work-list of
``(path, remaining_depth)`` pairs, so deep trees never hit the
interpreter's recursion limit. Dispatching does not wait for the
cleanup, so processes for earlier projects keep running while the walk
goes on.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from cleanrec.core.detector import is_project_root
from cleanrec.core.dispatcher import Dispatcher, dispatch
from cleanrec.core.errors import CleanRecursiveError, DispatchError, WalkError, format_error_chain
from cleanrec.core.policy import Disposition, IoErrorHandling, disposition_for
from cleanrec.models.execution import CleanExecution, DeleteMode
from cleanrec.utils.formatting import print_error

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 64

# Directory names never worth descending into
DEFAULT_SKIP_DIR_NAMES: frozenset[str] = frozenset({".git", ".rustup", ".cargo"})


class TreeWalker:
    """Walks a directory tree and starts a cleanup in every Cargo project.

    Args:
        mode: Delete options forwarded to every dispatch.
        skips: Directory names whose whole subtree is pruned.
            Defaults to DEFAULT_SKIP_DIR_NAMES when None.
        policy: How I/O errors met while reading directories are handled.
        dispatcher: Callable starting the cleanup for one project root.

    Example:
        >>> walker = TreeWalker(mode=DeleteMode(dry_run=True))
        >>> executions = walker.walk(Path.home() / "src", depth=8)
    """

    def __init__(
        self,
        *,
        mode: DeleteMode | None = None,
        skips: Iterable[str] | None = None,
        policy: IoErrorHandling = IoErrorHandling.RAISE_UNEXPECTED,
        dispatcher: Dispatcher = dispatch,
    ) -> None:
        self._mode = mode if mode is not None else DeleteMode()
        self._skips = frozenset(skips) if skips is not None else DEFAULT_SKIP_DIR_NAMES
        self._policy = policy
        self._dispatcher = dispatcher

    @property
    def skips(self) -> frozenset[str]:
        """Return the active skip set."""
        return self._skips

    @property
    def policy(self) -> IoErrorHandling:
        """Return the active I/O error handling policy."""
        return self._policy

    def walk(self, root: Path, depth: int) -> list[CleanExecution]:
        """Walk the tree below root and dispatch every project found.

        Args:
            root: Directory to start from.
            depth: Depth budget; the root consumes one level.

        Returns:
            Executions in dispatch order.

        Raises:
            WalkError: If the root directory cannot be read.
            DispatchError: If the cleanup for the root cannot be started.
        """
        executions: list[CleanExecution] = []
        self.walk_into(root, depth, executions)
        return executions

    def walk_into(self, root: Path, depth: int, executions: list[CleanExecution]) -> None:
        """Walk the tree below root, appending executions to a caller-owned list.

        A failure on any node below the root is reported with its full
        cause and the walk continues with the remaining nodes. A failure
        on the root itself is raised to the caller; executions started
        before it are already in the list.

        Args:
            root: Directory to start from.
            depth: Depth budget; the root consumes one level.
            executions: List receiving every started execution.

        Raises:
            WalkError: If the root directory cannot be read.
            DispatchError: If the cleanup for the root cannot be started.
        """
        pending: list[tuple[Path, int]] = []

        self._visit(root, depth, executions, pending)

        while pending:
            path, remaining = pending.pop()
            try:
                self._visit(path, remaining, executions, pending)
            except CleanRecursiveError as e:
                print_error(format_error_chain(e))

        logger.debug("Walk of %s dispatched %d execution(s)", root, len(executions))

    def _visit(
        self,
        path: Path,
        remaining: int,
        executions: list[CleanExecution],
        pending: list[tuple[Path, int]],
    ) -> None:
        """Process one node: detect, dispatch, then queue its subdirectories."""
        if remaining == 0:
            return

        if path.name in self._skips:
            logger.debug("Skipping %s", path)
            return

        try:
            found = is_project_root(path)
        except OSError as e:
            # An unsearchable directory cannot be listed either
            self._check(e, f"checking directory {path}")
            return

        if found:
            try:
                executions.append(self._dispatcher(path, self._mode))
            except DispatchError as e:
                msg = f"cleaning directory {path}"
                raise DispatchError(msg) from e

        try:
            entries = os.scandir(path)
        except OSError as e:
            self._check(e, f"reading directory {path}")
            return

        with entries:
            while True:
                try:
                    entry = next(entries)
                except StopIteration:
                    break
                except OSError as e:
                    # A failed scandir iterator cannot be resumed
                    self._check(e, f"reading directory entry {path}")
                    break

                if self._is_dir(entry):
                    pending.append((Path(entry.path), remaining - 1))

    def _is_dir(self, entry: os.DirEntry[str]) -> bool:
        """Check whether an entry is a real directory (symlinks excluded)."""
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError as e:
            self._check(e, f"reading directory entry {entry.path}")
            return False

    def _check(self, error: OSError, context: str) -> None:
        """Apply the I/O policy to a failed read.

        Returns normally if the failure is to be skipped.

        Raises:
            WalkError: If the policy propagates the failure.
        """
        if disposition_for(error, self._policy) == Disposition.SKIP:
            logger.debug("Ignoring I/O error (%s): %s", context, error)
            return
        raise WalkError(context) from error


def walk(
    root: Path,
    depth: int,
    skips: Iterable[str] | None = None,
    mode: DeleteMode | None = None,
    policy: IoErrorHandling = IoErrorHandling.RAISE_UNEXPECTED,
    dispatcher: Dispatcher = dispatch,
) -> list[CleanExecution]:
    """Walk root with a one-off TreeWalker.

    See TreeWalker.walk() for the traversal and error semantics.
    """
    walker = TreeWalker(mode=mode, skips=skips, policy=policy, dispatcher=dispatcher)
    return walker.walk(root, depth)
