"""Exception hierarchy for cleanrec.

Every error raised on purpose by cleanrec derives from CleanRecursiveError.
Context is attached by chaining (``raise X(msg) from e``) so that the full
cause can be reported with format_error_chain().
"""


class CleanRecursiveError(Exception):
    """Base class for all cleanrec errors."""


class WalkError(CleanRecursiveError):
    """A directory (or one of its entries) could not be read."""


class DispatchError(CleanRecursiveError):
    """The cleanup process for a project could not be started."""


class CollectError(CleanRecursiveError):
    """A started cleanup process could not be waited on."""


class SizeParseError(CleanRecursiveError, ValueError):
    """A token is not a human-readable byte size."""


class ConfigError(CleanRecursiveError):
    """The configuration file is unreadable or invalid."""


def format_error_chain(exc: BaseException) -> str:
    """Render an exception and its causes as ``outer: inner: root``.

    Follows ``__cause__`` first and falls back to ``__context__`` for
    implicitly chained exceptions. Messages identical to the previous
    one are collapsed.

    Args:
        exc: The outermost exception.

    Returns:
        Single-line description of the whole causal chain.
    """
    parts: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        message = str(current) or type(current).__name__
        if not parts or parts[-1] != message:
            parts.append(message)
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__suppress_context__:
            current = None
        else:
            current = current.__context__
    return ": ".join(parts)
