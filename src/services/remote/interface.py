"""
Abstract Remote Store Interface

DESIGN DECISION: Remote sync is optional. The tracker must work fully
without it, so the engine only talks to this interface and checks
is_configured() before every remote call.

The remote holds one logical row per device:
    {device_id, data: <serialized snapshot>, updated_at: <push time>}
Push upserts by device_id; pull is a point lookup returning zero or one row.

Failures are split so callers can react differently:
- RemoteUnavailableError: network trouble or timeout - proceed with local data
- RemoteRejectedError: the server refused (auth, validation) - tell the user
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.models.sync import RemoteSnapshot
from src.models.workout import Snapshot


class RemoteStoreInterface(ABC):
    """
    Abstract interface for the remote durable store.

    Both operations are idempotent: pushing the same snapshot twice or
    pulling without a push in between only refreshes timestamps.
    """

    @abstractmethod
    def is_configured(self) -> bool:
        """True only when an endpoint and a credential are both present."""
        pass

    @abstractmethod
    async def push(self, device_id: str, snapshot: Snapshot) -> datetime:
        """
        Upsert the device's snapshot.

        Returns:
            The server-side update time recorded for the row

        Raises:
            RemoteUnavailableError: Connectivity failure or timeout
            RemoteRejectedError: Server-side auth/validation failure
        """
        pass

    @abstractmethod
    async def pull(self, device_id: str) -> Optional[RemoteSnapshot]:
        """
        Fetch the device's snapshot.

        Returns:
            The remote snapshot, or None if this device never pushed

        Raises:
            RemoteUnavailableError: Connectivity failure or timeout
            RemoteRejectedError: Server-side auth/validation failure
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the client."""
        pass


class RemoteSyncError(Exception):
    """Base exception for remote sync operations."""
    pass


class RemoteUnavailableError(RemoteSyncError):
    """Could not reach the remote store (network, timeout, rate limit)."""
    pass


class RemoteRejectedError(RemoteSyncError):
    """The remote store refused the request (auth, permissions, bad data)."""
    pass
