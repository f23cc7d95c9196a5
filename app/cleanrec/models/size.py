"""Human-readable byte sizes.

Sizes are pydantic ByteSize values, an int subclass counting bytes that
understands literals such as ``986.5MiB`` or ``12 KB``.
"""

import re

from pydantic import ByteSize, TypeAdapter, ValidationError

from cleanrec.core.errors import SizeParseError

_BYTE_SIZE = TypeAdapter(ByteSize)

# Whole-token match: a number, then a byte unit with an optional decimal or binary prefix
_SIZE_LITERAL = re.compile(r"\d+(?:\.\d+)?\s?(?:[KMGTPE]i?)?B")

ZERO = ByteSize(0)


def parse_size(token: str) -> ByteSize:
    """Parse a human-readable byte size literal.

    The whole token must be a size; trailing characters and bit units
    are rejected.

    Args:
        token: Literal such as ``986.5MiB``, ``512B`` or ``3KB``.

    Returns:
        Parsed size in bytes.

    Raises:
        SizeParseError: If the token is not a size literal.
    """
    if _SIZE_LITERAL.fullmatch(token) is None:
        msg = f"invalid byte size {token!r}"
        raise SizeParseError(msg)

    try:
        return _BYTE_SIZE.validate_python(token)
    except ValidationError as e:
        msg = f"invalid byte size {token!r}"
        raise SizeParseError(msg) from e


def format_size(size: int) -> str:
    """Render a size with binary units, e.g. ``986.5MiB`` or ``0B``."""
    return ByteSize(size).human_readable()
