"""
In-memory Key-Value Store

Process-local storage for tests and throwaway sessions. An optional
byte quota reproduces the "storage full" failure of a real device store.
"""

from typing import Optional

from src.services.storage.interface import (
    KeyValueStoreInterface,
    LocalPersistenceError,
)


class MemoryKeyValueStore(KeyValueStoreInterface):
    """Dict-backed key-value store with an optional quota."""

    def __init__(self, max_bytes: Optional[int] = None):
        self._values: dict[str, str] = {}
        self._max_bytes = max_bytes
        self.unavailable = False  # flip to simulate a broken medium

    def _check_available(self) -> None:
        if self.unavailable:
            raise LocalPersistenceError("Storage is unavailable")

    def get(self, key: str) -> Optional[str]:
        self._check_available()
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_available()
        if self._max_bytes is not None:
            used = sum(
                len(v.encode("utf-8"))
                for k, v in self._values.items()
                if k != key
            )
            if used + len(value.encode("utf-8")) > self._max_bytes:
                raise LocalPersistenceError(
                    f"Quota exceeded writing {key} ({self._max_bytes} bytes)"
                )
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._check_available()
        self._values.pop(key, None)
