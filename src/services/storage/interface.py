"""
Abstract Local Persistence Interface

DESIGN DECISION: The tracker persists everything through a tiny
string-keyed, string-valued store. This allows us to:
1. Keep data in plain files on a device
2. Use in-memory storage for testing (including quota failures)
3. Keep the record store and sync engine decoupled from the medium

Three fixed keys are used: the full record snapshot, the device
identifier, and the last-sync timestamp.
"""

from abc import ABC, abstractmethod
from typing import Optional


# Fixed keys of the local persistence primitive
RECORDS_KEY = "hybrid-workout-data"
DEVICE_ID_KEY = "hybrid-workout-device-id"
SYNC_TIMESTAMP_KEY = "hybrid-workout-sync-timestamp"


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the local key-value primitive.

    Implementations raise LocalPersistenceError when the medium fails
    (quota exceeded, unreadable, corrupted).
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if the key was never set

        Raises:
            LocalPersistenceError: If the medium cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace a value atomically.

        Raises:
            LocalPersistenceError: If the write fails; the old value is kept
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a value. Deleting a missing key is not an error.

        Raises:
            LocalPersistenceError: If the medium cannot be written
        """
        pass

    def close(self) -> None:
        """Release any resources held by the store."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class LocalPersistenceError(StorageError):
    """The local persistence primitive failed (quota, corruption, I/O)."""
    pass
