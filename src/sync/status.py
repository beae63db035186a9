"""Sync status for display."""

from typing import Optional

from src.models.sync import SyncStatus
from src.services.remote.interface import RemoteStoreInterface
from src.services.storage.metadata import SyncMetadataStore


class SyncStatusReporter:
    """Reports whether remote sync is configured and when it last succeeded."""

    def __init__(
        self,
        remote: Optional[RemoteStoreInterface],
        metadata: SyncMetadataStore,
    ):
        self._remote = remote
        self._metadata = metadata

    def get_status(self) -> SyncStatus:
        if self._remote is None or not self._remote.is_configured():
            return SyncStatus(configured=False, last_sync_at=None)
        return SyncStatus(
            configured=True,
            last_sync_at=self._metadata.get_last_sync_at(),
        )
