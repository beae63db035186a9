"""
Storage Services Package

Provides the local persistence primitive (file or in-memory), the keyed
record store built on it, device identity and sync metadata.
"""

from src.services.storage.interface import (
    DEVICE_ID_KEY,
    RECORDS_KEY,
    SYNC_TIMESTAMP_KEY,
    KeyValueStoreInterface,
    LocalPersistenceError,
    StorageError,
)
from src.services.storage.file_store import FileKeyValueStore
from src.services.storage.memory import MemoryKeyValueStore
from src.services.storage.records import LocalRecordStore
from src.services.storage.identity import DeviceIdentityProvider, generate_device_id
from src.services.storage.metadata import SyncMetadataStore

__all__ = [
    # Interface and keys
    "DEVICE_ID_KEY",
    "RECORDS_KEY",
    "SYNC_TIMESTAMP_KEY",
    "KeyValueStoreInterface",
    # Exceptions
    "LocalPersistenceError",
    "StorageError",
    # Implementations
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "LocalRecordStore",
    "DeviceIdentityProvider",
    "generate_device_id",
    "SyncMetadataStore",
]
