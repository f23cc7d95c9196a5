"""cleanrec - run ``cargo clean`` in every Cargo project below a directory."""

__version__ = "0.3.0"
