"""
In-memory Remote Store

Stands in for the remote backend in tests and offline development.
Snapshots are stored serialized, so pull returns fresh copies exactly
like a real round trip would.
"""

from datetime import datetime, timezone
from typing import Optional

from src.models.sync import RemoteSnapshot
from src.models.workout import Snapshot, snapshot_from_json, snapshot_to_json
from src.services.remote.interface import RemoteStoreInterface, RemoteSyncError


class InMemoryRemoteStore(RemoteStoreInterface):
    """Dict-backed remote store with failure injection."""

    def __init__(self, configured: bool = True):
        self._configured = configured
        self._rows: dict[str, tuple[str, datetime]] = {}
        self.fail_with: Optional[RemoteSyncError] = None
        self.push_count = 0
        self.pull_count = 0

    def is_configured(self) -> bool:
        return self._configured

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def push(self, device_id: str, snapshot: Snapshot) -> datetime:
        self.push_count += 1
        self._maybe_fail()
        updated_at = datetime.now(timezone.utc)
        self._rows[device_id] = (snapshot_to_json(snapshot), updated_at)
        return updated_at

    async def pull(self, device_id: str) -> Optional[RemoteSnapshot]:
        self.pull_count += 1
        self._maybe_fail()
        row = self._rows.get(device_id)
        if row is None:
            return None
        data, updated_at = row
        return RemoteSnapshot(records=snapshot_from_json(data), updated_at=updated_at)

    def seed(self, device_id: str, snapshot: Snapshot, updated_at: Optional[datetime] = None) -> None:
        """Place a snapshot directly, as if another session had pushed it."""
        self._rows[device_id] = (
            snapshot_to_json(snapshot),
            updated_at or datetime.now(timezone.utc),
        )

    def stored(self, device_id: str) -> Optional[Snapshot]:
        """What the remote currently holds for a device."""
        row = self._rows.get(device_id)
        return snapshot_from_json(row[0]) if row else None
