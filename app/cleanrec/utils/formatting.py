"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich. Everything
cleanrec reports while running goes to ``err_console``.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

_STYLES: dict[str, str] = {
    "text": "#ffffff",
    "muted": "#b2bec3",
    "header": "bold #69B9A1",
    "success": "#03b971",
    "warning": "#f5b332",
    "error": "bold #f53263",
    "info": "#0ec1c8",
    "path": "#69B9A1",
}


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stderr.isatty():
        return "truecolor"
    return None


# Shared console instances; soft wrapping keeps long paths on one line
console = Console(theme=Theme(_STYLES), color_system=_detect_color_system(), soft_wrap=True)
err_console = Console(
    theme=Theme(_STYLES), stderr=True, color_system=_detect_color_system(), soft_wrap=True
)


def print_checking(path: object) -> None:
    """Announce that a project directory is being cleaned."""
    err_console.print(
        f"[info]Checking[/] [path]{escape(str(path))}[/]", highlight=False, emoji=False
    )


def print_captured_output(path: object, output: str) -> None:
    """Echo the captured output of one execution, headed by its path."""
    err_console.print(f"[header]==== {escape(str(path))} ====[/]", highlight=False, emoji=False)
    err_console.print(output, markup=False, highlight=False, emoji=False)


def print_summary(message: str) -> None:
    """Print the final summary line."""
    err_console.print(f"[success]{escape(message)}[/]", highlight=False, emoji=False)


def print_info(message: str) -> None:
    """Print an info message."""
    err_console.print(f"[info]{escape(message)}[/]", emoji=False)


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}", highlight=False, emoji=False)


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}", highlight=False, emoji=False)
