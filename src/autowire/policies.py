from __future__ import annotations

from enum import Enum


class MissingMethodPolicy(str, Enum):
    """Select what happens when the reflected member does not exist."""

    FAIL = "fail"
    """Raise ``ReflectionError`` naming the missing member."""

    TREAT_AS_NO_PARAMETERS = "treat_as_no_parameters"
    """Resolve to an empty argument list and construct with no arguments."""


class LockMode(Enum):
    """Select locking behavior for registry reads and writes.

    Resolution only reads registries, so ``NONE`` is safe whenever a registry
    is fully populated before it is shared between threads.
    """

    THREAD = "thread"
    """Guard the backing map with ``threading.RLock``."""

    NONE = "none"
    """Disable locking around the backing map."""
