"""Domain models for cleanrec.

This module exports the data structures shared by the walker, the
dispatcher and the collector.
"""

from cleanrec.models.execution import CleanExecution, CleanReport, DeleteMode, ExecutionOutcome
from cleanrec.models.size import ZERO, format_size, parse_size

__all__ = [
    "ZERO",
    "CleanExecution",
    "CleanReport",
    "DeleteMode",
    "ExecutionOutcome",
    "format_size",
    "parse_size",
]
