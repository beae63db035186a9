"""
Tests for the reconciliation engine and background pusher.

All tests run against the in-memory remote store; no network calls.
"""

import asyncio
import pytest
from datetime import datetime, timedelta, timezone

from src.models.workout import SessionKind, WorkoutRecord
from src.services.remote import (
    InMemoryRemoteStore,
    RemoteRejectedError,
    RemoteUnavailableError,
)
from src.services.storage import (
    DeviceIdentityProvider,
    LocalRecordStore,
    MemoryKeyValueStore,
    SyncMetadataStore,
)
from src.sync import NOT_CONFIGURED_MESSAGE, ReconciliationEngine, SyncStatusReporter


T1 = datetime(2024, 6, 11, 8, 0, tzinfo=timezone.utc)
T2 = T1 + timedelta(hours=2)


class GatedRemoteStore(InMemoryRemoteStore):
    """Remote store whose pushes block until the test opens the gate."""

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.gate = asyncio.Event()

    async def push(self, device_id, snapshot):
        self.started.set()
        await self.gate.wait()
        return await super().push(device_id, snapshot)


class ExplodingRemoteStore(InMemoryRemoteStore):
    """Remote store whose pull fails with an unexpected error."""

    async def pull(self, device_id):
        raise RuntimeError("unexpected")


class Harness:
    """Engine wired to in-memory stores the way WorkoutTracker wires it."""

    def __init__(self, remote=None):
        self.kv = MemoryKeyValueStore()
        self.store = LocalRecordStore(self.kv)
        self.identity = DeviceIdentityProvider(self.kv)
        self.metadata = SyncMetadataStore(self.kv)
        self.remote = remote
        self.engine = ReconciliationEngine(self.store, self.identity, remote, self.metadata)
        self.store.add_write_listener(self.engine.after_write)

    @property
    def device_id(self) -> str:
        return self.identity.get_or_create()


def run_record(date_key: str, updated_at=None, completed=False) -> WorkoutRecord:
    return WorkoutRecord(
        date_key=date_key,
        week_key="2024-06-10",
        day_label="tuesday",
        kind=SessionKind.RUN,
        payload={"runType": "speed"},
        completed=completed,
        updated_at=updated_at,
    )


class TestInitialize:
    """Tests for startup reconciliation."""

    @pytest.mark.asyncio
    async def test_not_configured_returns_local(self):
        remote = InMemoryRemoteStore(configured=False)
        h = Harness(remote)
        h.store.put_all({"2024-06-11": run_record("2024-06-11", T1)})
        try:
            snapshot = await h.engine.initialize()
        finally:
            await h.engine.close()

        assert set(snapshot) == {"2024-06-11"}
        assert remote.pull_count == 0
        assert remote.push_count == 0

    @pytest.mark.asyncio
    async def test_no_remote_returns_local(self):
        h = Harness(None)
        try:
            assert await h.engine.initialize() == {}
        finally:
            await h.engine.close()

    @pytest.mark.asyncio
    async def test_pull_failure_falls_back_to_local(self):
        """Test that an offline remote never blocks startup."""
        remote = InMemoryRemoteStore()
        remote.fail_with = RemoteUnavailableError("offline")
        h = Harness(remote)
        local = {"2024-06-11": run_record("2024-06-11", T1)}
        h.store.put_all(local)
        try:
            snapshot = await h.engine.initialize()
        finally:
            await h.engine.close()

        assert snapshot == local
        assert h.store.get_all() == local
        assert h.metadata.get_last_sync_at() is None

    @pytest.mark.asyncio
    async def test_unexpected_pull_error_falls_back_to_local(self):
        h = Harness(ExplodingRemoteStore())
        local = {"2024-06-11": run_record("2024-06-11", T1)}
        h.store.put_all(local)
        try:
            assert await h.engine.initialize() == local
        finally:
            await h.engine.close()

    @pytest.mark.asyncio
    async def test_empty_remote_keeps_local_without_push(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        local = {"2024-06-11": run_record("2024-06-11", T1)}
        h.store.put_all(local)
        try:
            snapshot = await h.engine.initialize()
            await h.engine.wait_for_pushes()
        finally:
            await h.engine.close()

        assert snapshot == local
        assert remote.pull_count == 1
        assert remote.push_count == 0
        assert h.metadata.get_last_sync_at() is None

    @pytest.mark.asyncio
    async def test_empty_remote_row_records_last_sync_time(self):
        """Test that a pull finding an empty row still counts as a sync."""
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        local = {"2024-06-11": run_record("2024-06-11", T1)}
        h.store.put_all(local)
        pulled_at = datetime(2024, 6, 1, tzinfo=timezone.utc)
        remote.seed(h.device_id, {}, updated_at=pulled_at)
        try:
            snapshot = await h.engine.initialize()
            await h.engine.wait_for_pushes()
        finally:
            await h.engine.close()

        assert snapshot == local
        assert remote.push_count == 0
        assert h.metadata.get_last_sync_at() == pulled_at

    @pytest.mark.asyncio
    async def test_later_remote_record_wins_and_converges(self):
        """Test the startup merge: remote edit at T2 beats local edit at T1."""
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        h.store.put_all({"2024-06-11": run_record("2024-06-11", T1, completed=False)})
        remote.seed(
            h.device_id,
            {"2024-06-11": run_record("2024-06-11", T2, completed=True)},
            updated_at=T2,
        )
        try:
            merged = await h.engine.initialize()
            await h.engine.wait_for_pushes()
        finally:
            await h.engine.close()

        assert merged["2024-06-11"].completed is True
        assert h.store.get_record("2024-06-11").completed is True
        # The merged snapshot is pushed back so the remote converges too
        assert remote.push_count == 1
        assert remote.stored(h.device_id)["2024-06-11"].completed is True
        assert h.metadata.get_last_sync_at() is not None

    @pytest.mark.asyncio
    async def test_pull_records_last_sync_time(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        remote.seed(h.device_id, {"2024-06-12": run_record("2024-06-12", T1)}, updated_at=T1)
        # Fail the convergence push so only the pull sets the timestamp
        original_push = remote.push

        async def failing_push(device_id, snapshot):
            raise RemoteUnavailableError("offline")

        remote.push = failing_push
        try:
            await h.engine.initialize()
            await h.engine.wait_for_pushes()
        finally:
            await h.engine.close()
            remote.push = original_push

        assert h.metadata.get_last_sync_at() == T1


class TestBackgroundPush:
    """Tests for fire-and-forget pushes after local writes."""

    @pytest.mark.asyncio
    async def test_write_triggers_push(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        try:
            await h.engine.initialize()
            assert h.store.put_record("2024-06-11", run_record("2024-06-11", completed=True))
            await h.engine.wait_for_pushes()
        finally:
            await h.engine.close()

        assert remote.push_count == 1
        assert remote.stored(h.device_id)["2024-06-11"].completed is True
        assert h.metadata.get_last_sync_at() is not None

    @pytest.mark.asyncio
    async def test_rapid_writes_collapse_into_one_push(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        try:
            await h.engine.initialize()
            for day in range(10, 15):
                h.store.put_record(f"2024-06-{day}", run_record(f"2024-06-{day}"))
            await h.engine.wait_for_pushes()
        finally:
            await h.engine.close()

        assert remote.push_count == 1
        assert len(remote.stored(h.device_id)) == 5

    @pytest.mark.asyncio
    async def test_writes_during_a_push_cause_one_follow_up(self):
        """Test that at most one push is queued behind the running one."""
        remote = GatedRemoteStore()
        h = Harness(remote)
        try:
            await h.engine.initialize()
            h.store.put_record("2024-06-10", run_record("2024-06-10"))
            await asyncio.wait_for(remote.started.wait(), timeout=1)

            for day in range(11, 15):
                h.store.put_record(f"2024-06-{day}", run_record(f"2024-06-{day}"))

            remote.gate.set()
            await asyncio.wait_for(h.engine.wait_for_pushes(), timeout=1)
        finally:
            await h.engine.close()

        assert remote.push_count == 2
        assert len(remote.stored(h.device_id)) == 5

    @pytest.mark.asyncio
    async def test_push_failure_does_not_affect_local_write(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        try:
            await h.engine.initialize()
            remote.fail_with = RemoteUnavailableError("offline")
            assert h.store.put_record("2024-06-11", run_record("2024-06-11")) is True
            await h.engine.wait_for_pushes()

            remote.fail_with = RemoteRejectedError("denied")
            assert h.store.put_record("2024-06-12", run_record("2024-06-12")) is True
            await h.engine.wait_for_pushes()
        finally:
            await h.engine.close()

        assert set(h.store.get_all()) == {"2024-06-11", "2024-06-12"}
        assert h.metadata.get_last_sync_at() is None

    @pytest.mark.asyncio
    async def test_write_from_another_thread_schedules_push(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        try:
            await h.engine.initialize()
            saved = await asyncio.to_thread(
                h.store.put_record, "2024-06-11", run_record("2024-06-11")
            )
            await h.engine.wait_for_pushes()
        finally:
            await h.engine.close()

        assert saved is True
        assert remote.push_count == 1

    @pytest.mark.asyncio
    async def test_close_drains_pending_push(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        await h.engine.initialize()
        h.store.put_record("2024-06-11", run_record("2024-06-11"))
        await h.engine.close(drain_timeout=1.0)

        assert remote.push_count == 1

    def test_write_before_start_is_not_pushed(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        assert h.store.put_record("2024-06-11", run_record("2024-06-11")) is True
        assert remote.push_count == 0


class TestManualSync:
    """Tests for user-requested sync."""

    @pytest.mark.asyncio
    async def test_not_configured(self):
        h = Harness(InMemoryRemoteStore(configured=False))
        result = await h.engine.manual_sync()
        assert result.success is False
        assert result.error == NOT_CONFIGURED_MESSAGE

    @pytest.mark.asyncio
    async def test_success_updates_last_sync(self):
        remote = InMemoryRemoteStore()
        h = Harness(remote)
        h.store.put_all({"2024-06-11": run_record("2024-06-11", T1)})

        result = await h.engine.manual_sync()

        assert result.success is True
        assert result.synced_at is not None
        assert h.metadata.get_last_sync_at() == result.synced_at
        assert set(remote.stored(h.device_id)) == {"2024-06-11"}

    @pytest.mark.asyncio
    async def test_failure_is_reported(self):
        remote = InMemoryRemoteStore()
        remote.fail_with = RemoteRejectedError("permission denied")
        h = Harness(remote)

        result = await h.engine.manual_sync()

        assert result.success is False
        assert "permission denied" in result.error
        assert h.metadata.get_last_sync_at() is None


class TestSyncStatus:
    """Tests for SyncStatusReporter."""

    def test_not_configured_has_no_last_sync(self):
        metadata = SyncMetadataStore(MemoryKeyValueStore())
        metadata.set_last_sync_at(T1)
        status = SyncStatusReporter(InMemoryRemoteStore(configured=False), metadata).get_status()
        assert status.configured is False
        assert status.last_sync_at is None

    def test_configured_reports_last_sync(self):
        metadata = SyncMetadataStore(MemoryKeyValueStore())
        reporter = SyncStatusReporter(InMemoryRemoteStore(), metadata)
        assert reporter.get_status().last_sync_at is None
        metadata.set_last_sync_at(T1)
        assert reporter.get_status().last_sync_at == T1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
