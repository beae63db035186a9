"""
Remote Sync Services Package

Abstract remote store interface, the Google Sheets implementation and an
in-memory implementation for tests and offline development.
"""

from src.services.remote.interface import (
    RemoteRejectedError,
    RemoteStoreInterface,
    RemoteSyncError,
    RemoteUnavailableError,
)
from src.services.remote.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRemoteStore,
)
from src.services.remote.memory import InMemoryRemoteStore

__all__ = [
    # Interface
    "RemoteStoreInterface",
    # Exceptions
    "RemoteRejectedError",
    "RemoteSyncError",
    "RemoteUnavailableError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRemoteStore",
    "InMemoryRemoteStore",
]
