from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager, nullcontext
from typing import Any, Protocol, runtime_checkable

from autowire.exceptions import RegistryKeyNotFoundError
from autowire.policies import LockMode


@runtime_checkable
class SupportsRegistry(Protocol):
    """Describe the read-only lookup surface the resolver consumes.

    ``has`` must report membership even when the stored value is ``None``;
    the resolver treats "present but empty" differently from "absent".
    """

    def has(self, key: Any) -> bool: ...

    def get(self, key: Any) -> Any: ...


class Registry:
    """Store service instances keyed by the type they satisfy.

    Setting a key that already exists replaces the previous value. A stored
    ``None`` is a real entry: ``has`` returns true and ``get`` returns ``None``.
    """

    def __init__(
        self,
        entries: Mapping[Any, Any] | None = None,
        *,
        lock_mode: LockMode = LockMode.THREAD,
    ) -> None:
        """Initialize a registry, optionally pre-populated.

        Args:
            entries: Initial key to instance mapping, copied on construction.
            lock_mode: Locking strategy for the backing map.

        """
        self._entries: dict[Any, Any] = dict(entries or {})
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if lock_mode is LockMode.THREAD else nullcontext()
        )

    def set(self, key: Any, value: Any) -> Any:
        """Store value under key and return it.

        Args:
            key: Dependency type the value satisfies.
            value: Instance to inject for ``key``. ``None`` is stored as-is.

        """
        with self._lock:
            self._entries[key] = value
        return value

    def has(self, key: Any) -> bool:
        """Return true when key has an entry, including a ``None`` entry.

        Args:
            key: Dependency type to look up.

        """
        with self._lock:
            return key in self._entries

    def get(self, key: Any) -> Any:
        """Return the value stored under key.

        Args:
            key: Dependency type to look up.

        Raises:
            RegistryKeyNotFoundError: If the key was never set or was unset.

        """
        with self._lock:
            try:
                return self._entries[key]
            except KeyError:
                raise RegistryKeyNotFoundError(key) from None

    def unset(self, key: Any) -> None:
        """Remove key if present."""
        with self._lock:
            self._entries.pop(key, None)

    def keys(self) -> list[Any]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        names = ", ".join(getattr(key, "__qualname__", repr(key)) for key in self.keys())
        return f"{type(self).__name__}({names})"


__all__ = ["Registry", "SupportsRegistry"]
