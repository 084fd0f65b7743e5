r"""Thread-safe identity-keyed storage backing the proxy registry and caches."""

from __future__ import annotations

from threading import RLock
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterator,
    MutableMapping,
    Tuple,
    TypeVar,
)

__all__ = ["WrapperCache", "IdentityStorage"]

KeyType = TypeVar("KeyType", bound=Hashable)
ValType = TypeVar("ValType")


class WrapperCache(Generic[KeyType, ValType]):
    """Build-once cache; each key's factory runs at most once across threads."""

    def __init__(self):
        self._storage: Dict[KeyType, ValType] = {}
        self._lock = RLock()

    def get_or_create(self, key: KeyType, factory: Callable[[], ValType]) -> ValType:
        with self._lock:
            if key not in self._storage:
                self._storage[key] = factory()
            return self._storage[key]

    def __iter__(self) -> Iterator[KeyType]:
        with self._lock:
            return iter(list(self._storage))

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._storage


class IdentityStorage(MutableMapping[Any, ValType], Generic[ValType]):
    """Thread-safe mapping keyed by object identity.

    Classes may define ``__eq__``/``__hash__`` on their metaclass, so keys are
    compared with ``is``. The key object is held alongside its value so its
    ``id`` cannot be recycled while the entry is alive.
    """

    def __init__(self):
        self._storage: Dict[int, Tuple[Any, ValType]] = {}
        self._lock = RLock()

    def __getitem__(self, key: Any) -> ValType:
        with self._lock:
            try:
                return self._storage[id(key)][1]
            except KeyError:
                raise KeyError(key) from None

    def __setitem__(self, key: Any, value: ValType) -> None:
        with self._lock:
            self._storage[id(key)] = (key, value)

    def __delitem__(self, key: Any) -> None:
        with self._lock:
            try:
                del self._storage[id(key)]
            except KeyError:
                raise KeyError(key) from None

    def __iter__(self) -> Iterator[Any]:
        with self._lock:
            return iter([key for key, _ in self._storage.values()])

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return id(key) in self._storage

    def set_if_absent(self, key: Any, value: ValType) -> bool:
        """Store `value` under `key` unless present; return True if stored."""
        with self._lock:
            if id(key) in self._storage:
                return False
            self._storage[id(key)] = (key, value)
            return True

    @property
    def lock(self) -> RLock:
        return self._lock
