"""CLI package for cleanrec.

This package contains the Typer application.
"""

from cleanrec.cli.main import app

__all__ = ["app"]
