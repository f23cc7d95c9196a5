"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
import stat
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from cleanrec.models.execution import CleanExecution, DeleteMode


def make_process(output: str = "", returncode: int = 0) -> MagicMock:
    """Create a stand-in for a finished ``cargo clean`` process."""
    process = MagicMock()
    process.communicate.return_value = (None, output)
    process.returncode = returncode
    process.pid = 4242
    return process


class RecordingDispatcher:
    """Dispatcher double that records every project root it is handed."""

    def __init__(self, output: str = "Removed 0 files", returncode: int = 0) -> None:
        self.calls: list[tuple[Path, DeleteMode]] = []
        self._output = output
        self._returncode = returncode

    def __call__(self, path: Path, mode: DeleteMode) -> CleanExecution:
        self.calls.append((path, mode))
        return CleanExecution(process=make_process(self._output, self._returncode), path=path)

    @property
    def paths(self) -> set[Path]:
        """Return the set of dispatched paths."""
        return {path for path, _ in self.calls}


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory so user config never leaks in."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def make_project() -> Callable[[Path], Path]:
    """Return a helper that turns a directory into a Cargo project root."""

    def _make(path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        (path / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n')
        return path

    return _make


@pytest.fixture
def recording_dispatcher() -> RecordingDispatcher:
    """Dispatcher double reporting that nothing was removed."""
    return RecordingDispatcher()


@pytest.fixture
def locked_dir(tmp_path: Path) -> Iterator[Path]:
    """Create a directory the current user can neither list nor search."""
    locked = tmp_path / "locked"
    (locked / "inner").mkdir(parents=True)
    (locked / "inner" / "Cargo.toml").write_text("")
    locked.chmod(0)
    try:
        if os.access(locked, os.R_OK | os.X_OK):
            pytest.skip("file permissions are not enforced for this user")
        yield locked
    finally:
        locked.chmod(stat.S_IRWXU)


@pytest.fixture
def cargo_removed_output() -> str:
    """Sample output of a ``cargo clean`` that removed something."""
    return "     Removed 2020 files, 986.5MiB total\n"


@pytest.fixture
def cargo_dry_run_output() -> str:
    """Sample output of ``cargo clean --dry-run``."""
    return (
        "     Summary 12 files, 1.5KiB total\n"
        "warning: no files deleted due to --dry-run\n"
    )
