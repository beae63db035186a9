"""
Main Orchestrator for Hybrid Workout Tracker

This module ties together all the components and defines the
operations the UI (or CLI) performs:
1. Startup (reconcile with remote → ready)
2. Day records (open → edit → save → background push)
3. Backup (export, import with confirmation, clear)
4. Sync (status, manual sync, device identity)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The UI only touches records through the local record store
- Imports replace data only after an explicit confirm step
- Sync trouble never blocks a read or a write

Lifecycle: create_tracker() → start() → use → close(),
or `async with create_tracker() as tracker:`.
"""

from datetime import date
from typing import Optional

import structlog

from src.config import Settings, get_settings
from src.dates import date_key_for_day, offset_from_today, today_key, week_anchor_key
from src.models.plans import default_record
from src.models.sync import SyncResult, SyncStatus
from src.models.workout import Snapshot, WorkoutRecord
from src.services.remote import GoogleSheetsRemoteStore, RemoteStoreInterface
from src.services.storage import (
    DeviceIdentityProvider,
    FileKeyValueStore,
    KeyValueStoreInterface,
    LocalRecordStore,
    SyncMetadataStore,
)
from src.services.transfer import (
    export_document,
    export_filename,
    parse_import_document,
)
from src.sync import ReconciliationEngine, SyncStatusReporter


logger = structlog.get_logger(__name__)


class WorkoutTracker:
    """
    Application facade over the storage and sync engine.

    Owns the single local record store (the one writer of the snapshot).
    """

    def __init__(
        self,
        kv_store: KeyValueStoreInterface,
        remote: Optional[RemoteStoreInterface] = None,
        drain_timeout: float = 0.0,
    ):
        self._kv = kv_store
        self._remote = remote
        self._drain_timeout = drain_timeout

        self._records = LocalRecordStore(kv_store)
        self._identity = DeviceIdentityProvider(kv_store)
        self._metadata = SyncMetadataStore(kv_store)
        self._engine = ReconciliationEngine(
            store=self._records,
            identity=self._identity,
            remote=remote,
            metadata=self._metadata,
        )
        self._status = SyncStatusReporter(remote, self._metadata)
        self._records.add_write_listener(self._engine.after_write)
        self._ready = False

    @property
    def ready(self) -> bool:
        """True once startup reconciliation has finished (or failed soft)."""
        return self._ready

    @property
    def records(self) -> LocalRecordStore:
        return self._records

    async def start(self) -> Snapshot:
        """Reconcile with the remote store; returns the session's snapshot."""
        snapshot = await self._engine.initialize()
        self._ready = True
        logger.info(
            "tracker_ready",
            records=len(snapshot),
            remote_configured=self._engine.remote_configured,
        )
        return snapshot

    async def close(self) -> None:
        await self._engine.close(self._drain_timeout)
        if self._remote is not None:
            await self._remote.close()
        self._records.close()
        self._ready = False

    async def __aenter__(self) -> "WorkoutTracker":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Day records
    # ------------------------------------------------------------------

    def get_day(self, date_key: str) -> Optional[WorkoutRecord]:
        return self._records.get_record(date_key)

    def open_day(
        self,
        day_label: str,
        week_key: Optional[str] = None,
        today: Optional[date] = None,
    ) -> WorkoutRecord:
        """
        Get the record for a weekday within a rolling week.

        If the day has never been saved, a blank record is built from
        the weekday's plan. It is not persisted until save_day().
        """
        week_key = week_key or week_anchor_key(today)
        date_key = date_key_for_day(week_key, offset_from_today(day_label, today))
        existing = self._records.get_record(date_key)
        if existing is not None:
            return existing
        return default_record(day_label, date_key, week_key)

    def save_day(self, record: WorkoutRecord) -> bool:
        """Save a day's record; a background push follows automatically."""
        return self._records.put_record(record.date_key, record)

    def list_weeks(self) -> list[str]:
        return self._records.week_keys()

    def get_week(self, week_key: str) -> Snapshot:
        return self._records.get_week(week_key)

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    def export_document(self) -> str:
        return export_document(self._records.get_all())

    def export_filename(self) -> str:
        return export_filename(today_key())

    def preview_import(self, document: str | bytes) -> Snapshot:
        """
        Parse an import document without touching local data.

        Raises:
            MalformedImportError: If the document cannot be parsed
        """
        return parse_import_document(document)

    def confirm_import(self, snapshot: Snapshot) -> bool:
        """Replace all local records with an imported snapshot (pushed like any write)."""
        saved = self._records.put_all(snapshot)
        logger.info("import_applied", records=len(snapshot), saved=saved)
        return saved

    def clear_all(self) -> bool:
        """Delete every local record. The remote copy is left alone."""
        return self._records.clear()

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def sync_status(self) -> SyncStatus:
        return self._status.get_status()

    async def manual_sync(self) -> SyncResult:
        return await self._engine.manual_sync()

    async def wait_for_pushes(self) -> None:
        await self._engine.wait_for_pushes()

    def device_id(self) -> str:
        return self._identity.get_or_create()

    def reset_device_id(self) -> str:
        device_id = self._identity.reset()
        logger.info("device_id_reset", device_id=device_id)
        return device_id


def create_tracker(
    settings: Optional[Settings] = None,
    kv_store: Optional[KeyValueStoreInterface] = None,
    remote: Optional[RemoteStoreInterface] = None,
) -> WorkoutTracker:
    """
    Factory function to create a tracker from settings.

    Args:
        settings: Application settings (defaults to get_settings())
        kv_store: Local persistence primitive (defaults to files in data_dir)
        remote: Remote store (defaults to Google Sheets; inactive when
                its settings are incomplete)

    Returns:
        An unstarted WorkoutTracker
    """
    settings = settings or get_settings()
    app_settings = settings.app

    if kv_store is None:
        kv_store = FileKeyValueStore(app_settings.data_path)

    if remote is None:
        sheets_settings = settings.google_sheets
        if sheets_settings.is_configured:
            remote = GoogleSheetsRemoteStore(settings=sheets_settings)
        else:
            logger.info("remote_sync_disabled", reason="google_sheets_not_configured")

    return WorkoutTracker(
        kv_store=kv_store,
        remote=remote,
        drain_timeout=app_settings.push_drain_timeout_seconds,
    )
