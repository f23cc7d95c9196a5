"""Main CLI application entry point.

Defines the Typer application for ``cargo-clean-recursive``. The command
walks a directory tree, starts ``cargo clean`` in every Cargo project it
finds and reports the total space freed.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from cleanrec import __version__
from cleanrec.core.collector import collect
from cleanrec.core.config import CleanConfig, load_config
from cleanrec.core.errors import CleanRecursiveError, ConfigError, format_error_chain
from cleanrec.core.paths import APP_NAME
from cleanrec.core.policy import IoErrorHandling
from cleanrec.core.walker import TreeWalker
from cleanrec.models.execution import CleanExecution, CleanReport, DeleteMode
from cleanrec.utils.formatting import print_error, print_summary

logger = logging.getLogger(__name__)

# Cargo runs `cargo-clean-recursive clean-recursive ...` for `cargo clean-recursive ...`
CARGO_SUBCOMMAND = "clean-recursive"

# Create main Typer app
app = typer.Typer(
    name=APP_NAME,
    help="Run `cargo clean` in every Cargo project below a directory.",
    rich_markup_mode="rich",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"{APP_NAME} version {__version__}")
        raise typer.Exit()


def split_skips(values: list[str]) -> list[str]:
    """Flatten repeated and comma-separated --skips values."""
    return [name.strip() for value in values for name in value.split(",") if name.strip()]


def strip_cargo_subcommand(argv: list[str]) -> list[str]:
    """Drop the subcommand name Cargo passes when run as ``cargo clean-recursive``."""
    if argv and argv[0] == CARGO_SUBCOMMAND:
        return argv[1:]
    return argv


@app.command()
def clean(
    path: Annotated[
        Path | None,
        typer.Argument(
            help="Target directory. Defaults to the current directory.",
            show_default=False,
        ),
    ] = None,
    doc: Annotated[
        bool,
        typer.Option("--doc", "-d", help="Delete documentation artifacts."),
    ] = False,
    release: Annotated[
        bool,
        typer.Option("--release", "-r", help="Delete release artifacts."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Display what would be deleted without actually deleting anything.",
        ),
    ] = False,
    depth: Annotated[
        int | None,
        typer.Option("--depth", min=0, help="Recursive search depth limit. [default: 64]"),
    ] = None,
    skips: Annotated[
        list[str] | None,
        typer.Option(
            "--skips",
            help="Skip directories with these names (repeatable or comma-separated). "
            "[default: .git, .rustup, .cargo]",
        ),
    ] = None,
    io_error_handling: Annotated[
        IoErrorHandling | None,
        typer.Option(
            "--io-error-handling",
            help="How to handle I/O errors. [default: raise-unexpected]",
            case_sensitive=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show the output of every cargo clean."),
    ] = False,
    jobs: Annotated[
        int | None,
        typer.Option(
            "--jobs", "-j", min=1, help="Wait on at most N cleanups at once. [default: 8]"
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option(
            "--timeout",
            min=0.001,
            help="Kill a cargo clean still running after this many seconds.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Read defaults from this configuration file."),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Recursively run `cargo clean` and report the space saved."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(format_error_chain(e))
        raise typer.Exit(code=1) from e

    mode = DeleteMode(doc=doc, release=release, dry_run=dry_run)
    walker = TreeWalker(
        mode=mode,
        skips=split_skips(skips) if skips else config.skips,
        policy=io_error_handling if io_error_handling is not None else config.io_error_handling,
    )
    root = path if path is not None else Path.cwd()
    budget = depth if depth is not None else config.depth

    executions: list[CleanExecution] = []
    try:
        walker.walk_into(root, budget, executions)
    except CleanRecursiveError as e:
        print_error(format_error_chain(e))
        # Reap whatever was already started before giving up
        _collect(executions, mode, config, verbose=verbose, jobs=jobs, timeout=timeout)
        raise typer.Exit(code=1) from e

    report = _collect(executions, mode, config, verbose=verbose, jobs=jobs, timeout=timeout)
    logger.info(
        "Collected %d execution(s): %d succeeded, %d failed, %d unparsable, %d wait error(s)",
        report.dispatched,
        report.succeeded,
        report.failed,
        report.unparsable,
        report.wait_errors,
    )
    print_summary(report.summary_line)


def _collect(
    executions: list[CleanExecution],
    mode: DeleteMode,
    config: CleanConfig,
    *,
    verbose: bool,
    jobs: int | None,
    timeout: float | None,
) -> CleanReport:
    """Run the join phase with command-line values falling back to config."""
    return collect(
        executions,
        mode,
        verbose=verbose,
        jobs=jobs if jobs is not None else config.jobs,
        timeout=timeout if timeout is not None else config.timeout,
    )


def run() -> None:
    """Console script entry point, also usable as a Cargo subcommand."""
    app(args=strip_cargo_subcommand(sys.argv[1:]), prog_name=APP_NAME)


if __name__ == "__main__":
    run()
