"""Non-blocking dispatch of ``cargo clean``.

dispatch() starts the cleanup for one project root and hands back the
live process immediately, so the walker keeps discovering projects
while earlier cleanups are still running.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from cleanrec.core.errors import DispatchError
from cleanrec.models.execution import CleanExecution, DeleteMode
from cleanrec.utils.formatting import print_checking
from cleanrec.utils.shell import spawn_captured

logger = logging.getLogger(__name__)

CLEAN_COMMAND: tuple[str, ...] = ("cargo", "clean")

# Signature shared by dispatch() and test doubles injected into the walker
Dispatcher = Callable[[Path, DeleteMode], CleanExecution]


def build_command(mode: DeleteMode) -> list[str]:
    """Build the full ``cargo clean`` command line for a delete mode."""
    return [*CLEAN_COMMAND, *mode.clean_args()]


def dispatch(path: Path, mode: DeleteMode) -> CleanExecution:
    """Start ``cargo clean`` in a project root without waiting for it.

    Announces the directory on the error stream before the process is
    started.

    Args:
        path: Cargo project root, used as the working directory.
        mode: Delete options forwarded as flags.

    Returns:
        CleanExecution pairing the running process with its path.

    Raises:
        DispatchError: If the process cannot be started.
    """
    print_checking(path)

    args = build_command(mode)
    try:
        process = spawn_captured(args, cwd=path)
    except OSError as e:
        msg = "failed to spawn `cargo clean`"
        raise DispatchError(msg) from e

    logger.debug("Spawned %s in %s (pid=%s)", " ".join(args), path, process.pid)
    return CleanExecution(process=process, path=path)
