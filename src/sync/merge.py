"""
Snapshot Merge

Per-record last-writer-wins. The record with the later updated_at
replaces the other one in full; there is no field-level merge.

Rules for a key present locally:
- remote has no record for it, or the remote record has no timestamp -> local
- local timestamp present and strictly later than remote's -> local
- otherwise (remote later, equal timestamps, local untimestamped) -> remote

Ties go to the remote record.
"""

from typing import Optional

from src.models.workout import Snapshot, WorkoutRecord


def local_wins(local: WorkoutRecord, remote: Optional[WorkoutRecord]) -> bool:
    """Whether the local record should replace the remote one."""
    if remote is None or remote.updated_at is None:
        return True
    return local.updated_at is not None and local.updated_at > remote.updated_at


def merge_snapshots(local: Snapshot, remote: Snapshot) -> Snapshot:
    """Merge two snapshots, starting from remote and overlaying winning local records."""
    merged = dict(remote)
    for date_key, record in local.items():
        if local_wins(record, remote.get(date_key)):
            merged[date_key] = record
    return merged
