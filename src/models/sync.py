"""
Sync Models

Small value types exchanged between the sync engine, the remote store
and whoever displays sync state.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.models.workout import Snapshot


class RemoteSnapshot(BaseModel):
    """A snapshot as stored remotely for one device."""

    records: Snapshot = Field(default_factory=dict)
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Server-side time of the last push"
    )

    @property
    def is_empty(self) -> bool:
        return not self.records


class SyncStatus(BaseModel):
    """What the UI shows about sync."""

    configured: bool
    last_sync_at: Optional[datetime] = None


class SyncResult(BaseModel):
    """Outcome of a user-requested sync."""

    success: bool
    error: Optional[str] = None
    synced_at: Optional[datetime] = None

    @classmethod
    def ok(cls, synced_at: datetime) -> "SyncResult":
        return cls(success=True, synced_at=synced_at)

    @classmethod
    def failed(cls, error: str) -> "SyncResult":
        return cls(success=False, error=error)
