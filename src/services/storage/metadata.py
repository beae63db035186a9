"""Persisted sync metadata (last successful sync time)."""

from datetime import datetime
from typing import Optional

import structlog

from src.services.storage.interface import (
    SYNC_TIMESTAMP_KEY,
    KeyValueStoreInterface,
    LocalPersistenceError,
)


logger = structlog.get_logger(__name__)


class SyncMetadataStore:
    """Best-effort storage of lastSyncAt; failures are logged, never raised."""

    def __init__(self, kv_store: KeyValueStoreInterface):
        self._kv = kv_store

    def get_last_sync_at(self) -> Optional[datetime]:
        try:
            raw = self._kv.get(SYNC_TIMESTAMP_KEY)
        except LocalPersistenceError as e:
            logger.warning("sync_timestamp_read_failed", error=str(e))
            return None
        if not raw:
            return None
        try:
            # Older values may use a trailing "Z"
            return datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning("sync_timestamp_malformed", value=raw)
            return None

    def set_last_sync_at(self, when: datetime) -> None:
        try:
            self._kv.set(SYNC_TIMESTAMP_KEY, when.isoformat())
        except LocalPersistenceError as e:
            logger.warning("sync_timestamp_write_failed", error=str(e))
