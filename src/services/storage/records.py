"""
Local Record Store

The always-available source of truth for the UI. The whole snapshot is
serialized as one value under a fixed key.

DESIGN DECISION: Reads never fail. If the backing store is empty,
unreadable or corrupted, we log and return an empty snapshot - starting
empty is better than blocking the user from logging a workout.

Writes are read-modify-write over the entire snapshot, so every access
goes through a single lock owned by this object.
"""

import threading
from datetime import datetime
from typing import Callable, Optional

import structlog

from src.models.workout import (
    Snapshot,
    WorkoutRecord,
    snapshot_from_json,
    snapshot_to_json,
)
from src.services.storage.interface import (
    RECORDS_KEY,
    KeyValueStoreInterface,
    LocalPersistenceError,
)


logger = structlog.get_logger(__name__)

WriteListener = Callable[[], None]


def _local_now() -> datetime:
    return datetime.now().astimezone()


class LocalRecordStore:
    """
    Keyed record store over the local persistence primitive.

    Lifecycle: construct with a key-value store, use, then close().
    """

    def __init__(
        self,
        kv_store: KeyValueStoreInterface,
        clock: Callable[[], datetime] = _local_now,
    ):
        self._kv = kv_store
        self._clock = clock
        self._lock = threading.RLock()
        self._listeners: list[WriteListener] = []

    def add_write_listener(self, listener: WriteListener) -> None:
        """Register a callback run after every successful write."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                # A listener must never turn a saved write into a failure
                logger.exception("write_listener_failed")

    def get_all(self) -> Snapshot:
        """Get the current snapshot; empty if nothing is stored or it is unreadable."""
        with self._lock:
            try:
                raw = self._kv.get(RECORDS_KEY)
            except LocalPersistenceError as e:
                logger.error("local_read_failed", error=str(e))
                return {}

            if not raw:
                return {}

            try:
                return snapshot_from_json(raw)
            except ValueError as e:
                logger.error("local_snapshot_corrupted", error=str(e))
                return {}

    def get_record(self, date_key: str) -> Optional[WorkoutRecord]:
        """Get one day's record, or None if the day was never saved."""
        return self.get_all().get(date_key)

    def put_all(self, snapshot: Snapshot, notify: bool = True) -> bool:
        """
        Replace the entire persisted snapshot.

        Returns:
            True if saved; on False nothing was changed
        """
        for key, record in snapshot.items():
            if record.date_key != key:
                raise ValueError(
                    f"Record key {key!r} does not match its dateKey {record.date_key!r}"
                )

        with self._lock:
            saved = self._persist(snapshot)

        if saved and notify:
            self._notify()
        return saved

    def _persist(self, snapshot: Snapshot) -> bool:
        try:
            self._kv.set(RECORDS_KEY, snapshot_to_json(snapshot))
        except LocalPersistenceError as e:
            logger.error("local_write_failed", error=str(e), records=len(snapshot))
            return False
        logger.debug("local_snapshot_saved", records=len(snapshot))
        return True

    def put_record(self, date_key: str, record: WorkoutRecord) -> bool:
        """
        Save one day's record, stamping updated_at with the local time.

        The stamp never goes backwards for a key, even if the clock does.

        Raises:
            ValueError: If the record's key differs, or it would change
                the kind of an existing record
        """
        if record.date_key != date_key:
            raise ValueError(
                f"Record dateKey {record.date_key!r} does not match {date_key!r}"
            )

        with self._lock:
            snapshot = self.get_all()
            previous = snapshot.get(date_key)

            if previous is not None and previous.kind != record.kind:
                raise ValueError(
                    f"Cannot change kind of {date_key} from "
                    f"{previous.kind.value} to {record.kind.value}"
                )

            stamp = self._clock()
            if previous is not None and previous.updated_at and previous.updated_at > stamp:
                stamp = previous.updated_at

            snapshot[date_key] = record.model_copy(update={"updated_at": stamp}, deep=True)
            saved = self._persist(snapshot)

        if saved:
            self._notify()
        return saved

    def clear(self) -> bool:
        """Remove every record. Not pushed to the remote store."""
        with self._lock:
            try:
                self._kv.delete(RECORDS_KEY)
            except LocalPersistenceError as e:
                logger.error("local_clear_failed", error=str(e))
                return False
        logger.info("local_snapshot_cleared")
        return True

    def week_keys(self) -> list[str]:
        """All week anchors that have records, newest first."""
        weeks = {record.week_key for record in self.get_all().values() if record.week_key}
        return sorted(weeks, reverse=True)

    def get_week(self, week_key: str) -> Snapshot:
        """Records opened under one week anchor."""
        return {
            key: record
            for key, record in self.get_all().items()
            if record.week_key == week_key
        }

    def close(self) -> None:
        with self._lock:
            self._kv.close()
