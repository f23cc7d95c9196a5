"""Shell execution utilities.

Provides non-blocking subprocess spawning for commands whose standard
error is read back later.
"""

import subprocess
from pathlib import Path


def spawn_captured(args: list[str], *, cwd: Path | str | None = None) -> subprocess.Popen[str]:
    """Start a command without waiting for it.

    Standard input is closed, standard output is discarded and standard
    error is piped for later reading. Output is decoded as UTF-8, with
    undecodable bytes replaced.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        The running process.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If the command cannot be started.
    """
    return subprocess.Popen(
        args,
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
