"""I/O error tolerance policy for the tree walk.

The walker never inspects OS error codes itself. It hands every failed
filesystem read to disposition_for() and either skips the affected node
or entry, or re-raises with context.
"""

import errno
from enum import Enum


class IoErrorHandling(str, Enum):
    """How to handle I/O errors met while walking the tree.

    Attributes:
        IGNORE: Ignore all I/O errors.
        RAISE_UNEXPECTED: Skip expected errors (permission denied), raise the rest.
        RAISE_ALL: Raise every I/O error.
    """

    IGNORE = "ignore"
    RAISE_UNEXPECTED = "raise-unexpected"
    RAISE_ALL = "raise-all"


class Disposition(str, Enum):
    """What the walker does with a failed read."""

    SKIP = "skip"
    PROPAGATE = "propagate"


_PERMISSION_ERRNOS = frozenset({errno.EACCES, errno.EPERM})


def is_permission_denied(error: OSError) -> bool:
    """Check whether an OS error means the user lacks permission."""
    return isinstance(error, PermissionError) or error.errno in _PERMISSION_ERRNOS


def classify(permission_denied: bool, policy: IoErrorHandling) -> Disposition:
    """Map a normalized error signal to a disposition under a policy.

    Args:
        permission_denied: True if the failure was a permission error.
        policy: Active I/O error handling policy.

    Returns:
        Disposition.SKIP if the failure should be swallowed,
        Disposition.PROPAGATE if it should abort the current node.
    """
    if policy == IoErrorHandling.IGNORE:
        return Disposition.SKIP
    if policy == IoErrorHandling.RAISE_UNEXPECTED and permission_denied:
        return Disposition.SKIP
    return Disposition.PROPAGATE


def disposition_for(error: OSError, policy: IoErrorHandling) -> Disposition:
    """Classify a concrete OS error under a policy."""
    return classify(is_permission_denied(error), policy)
