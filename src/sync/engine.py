"""
Reconciliation Engine

Keeps the local record store and the optional remote store in step.

Three operations:
1. initialize() - on startup, pull the remote snapshot once, merge it
   with the local one (per-record last-writer-wins) and save the result
2. after_write() - after every local write, schedule a background push
   of the full local snapshot (fire-and-forget)
3. manual_sync() - push now and report the outcome to the user

DESIGN DECISION: Local-first. Nothing on the startup or background path
may stop the app from working: remote failures are logged and the local
data is used as-is. Only manual_sync reports failures, because the user
asked for it and expects an answer.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import structlog

from src.models.sync import SyncResult
from src.models.workout import Snapshot
from src.services.remote.interface import (
    RemoteRejectedError,
    RemoteStoreInterface,
    RemoteSyncError,
)
from src.services.storage.identity import DeviceIdentityProvider
from src.services.storage.metadata import SyncMetadataStore
from src.services.storage.records import LocalRecordStore
from src.sync.merge import merge_snapshots
from src.sync.worker import BackgroundPusher


logger = structlog.get_logger(__name__)

NOT_CONFIGURED_MESSAGE = "Remote sync is not configured"


class ReconciliationEngine:
    """
    Merges local and remote snapshots and pushes local changes.

    The engine holds no in-flight state beyond its background pusher;
    everything durable lives in the local store and the remote store.
    """

    def __init__(
        self,
        store: LocalRecordStore,
        identity: DeviceIdentityProvider,
        remote: Optional[RemoteStoreInterface],
        metadata: SyncMetadataStore,
    ):
        self._store = store
        self._identity = identity
        self._remote = remote
        self._metadata = metadata
        self._pusher = BackgroundPusher(self._background_push)
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def remote_configured(self) -> bool:
        return self._remote is not None and self._remote.is_configured()

    def start(self) -> None:
        """Bind to the running event loop and start the background pusher."""
        self._loop = asyncio.get_running_loop()
        if self.remote_configured:
            self._pusher.start()

    async def initialize(self) -> Snapshot:
        """
        Reconcile on startup and return the snapshot to use for the session.

        Never raises because of remote trouble; falls back to local data.
        """
        self.start()
        local = self._store.get_all()

        if not self.remote_configured:
            logger.info("sync_initialize_local_only", records=len(local))
            return local

        device_id = self._identity.get_or_create()
        try:
            remote = await self._remote.pull(device_id)
        except RemoteSyncError as e:
            logger.warning(
                "sync_initialize_pull_failed",
                device_id=device_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return local
        except Exception:
            logger.exception("sync_initialize_unexpected_error", device_id=device_id)
            return local

        if remote is None:
            logger.info("sync_initialize_remote_missing", device_id=device_id)
            return local

        self._metadata.set_last_sync_at(remote.updated_at or datetime.now(timezone.utc))

        if remote.is_empty:
            logger.info("sync_initialize_remote_empty", device_id=device_id)
            return local

        merged = merge_snapshots(local, remote.records)
        # Saving through put_all also pushes, so the remote converges on the merge
        if not self._store.put_all(merged):
            logger.warning("sync_initialize_persist_failed", records=len(merged))

        logger.info(
            "sync_initialize_merged",
            device_id=device_id,
            local_records=len(local),
            remote_records=len(remote.records),
            merged_records=len(merged),
        )
        return merged

    def after_write(self) -> None:
        """
        Schedule a background push. Safe to call from any thread; never blocks.
        """
        if not self.remote_configured:
            return
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("background_push_skipped", reason="engine_not_started")
            return

        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None

        if current is loop:
            self._pusher.request()
        else:
            loop.call_soon_threadsafe(self._pusher.request)

    async def manual_sync(self) -> SyncResult:
        """Push the local snapshot now and report the outcome."""
        if not self.remote_configured:
            return SyncResult.failed(NOT_CONFIGURED_MESSAGE)

        try:
            pushed_at = await self._push_snapshot()
        except RemoteSyncError as e:
            logger.warning(
                "manual_sync_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return SyncResult.failed(str(e))

        return SyncResult.ok(pushed_at)

    async def _push_snapshot(self) -> datetime:
        device_id = self._identity.get_or_create()
        snapshot = self._store.get_all()
        pushed_at = await self._remote.push(device_id, snapshot)
        self._metadata.set_last_sync_at(pushed_at)
        return pushed_at

    async def _background_push(self) -> None:
        try:
            await self._push_snapshot()
        except RemoteRejectedError as e:
            logger.error("background_push_rejected", error=str(e))
        except RemoteSyncError as e:
            logger.warning("background_push_failed", error=str(e))

    async def wait_for_pushes(self) -> None:
        """Wait until queued background pushes have finished."""
        if self._pusher.running:
            await self._pusher.wait_idle()

    async def close(self, drain_timeout: float = 0.0) -> None:
        await self._pusher.stop(drain_timeout)
        self._loop = None
