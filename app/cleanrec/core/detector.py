"""Cargo project detection."""

from pathlib import Path

MARKER_FILE = "Cargo.toml"


def is_project_root(path: Path) -> bool:
    """Check whether a directory is a Cargo project root.

    Only the presence of Cargo.toml directly inside the directory is
    checked; its contents are left to ``cargo clean``.

    Args:
        path: Directory to test.

    Returns:
        True if the directory contains a Cargo.toml file.

    Raises:
        OSError: If the directory cannot be searched (e.g. permission denied).
    """
    return (path / MARKER_FILE).is_file()
