"""Services package."""

from src.services.remote import (
    GoogleSheetsClient,
    GoogleSheetsRemoteStore,
    InMemoryRemoteStore,
    RemoteRejectedError,
    RemoteStoreInterface,
    RemoteSyncError,
    RemoteUnavailableError,
)
from src.services.storage import (
    DeviceIdentityProvider,
    FileKeyValueStore,
    KeyValueStoreInterface,
    LocalPersistenceError,
    LocalRecordStore,
    MemoryKeyValueStore,
    StorageError,
    SyncMetadataStore,
)
from src.services.transfer import (
    MalformedImportError,
    export_document,
    export_filename,
    parse_import_document,
)

__all__ = [
    # Remote services
    "GoogleSheetsClient",
    "GoogleSheetsRemoteStore",
    "InMemoryRemoteStore",
    "RemoteRejectedError",
    "RemoteStoreInterface",
    "RemoteSyncError",
    "RemoteUnavailableError",
    # Storage services
    "DeviceIdentityProvider",
    "FileKeyValueStore",
    "KeyValueStoreInterface",
    "LocalPersistenceError",
    "LocalRecordStore",
    "MemoryKeyValueStore",
    "StorageError",
    "SyncMetadataStore",
    # Export / import
    "MalformedImportError",
    "export_document",
    "export_filename",
    "parse_import_document",
]
