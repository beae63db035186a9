"""
Data Models Package

This package contains all Pydantic models used in the Hybrid Workout Tracker.
All data flowing through the sync engine must conform to these schemas.
"""

from src.models.workout import (
    SessionKind,
    Snapshot,
    WorkoutRecord,
    snapshot_from_json,
    snapshot_to_json,
)
from src.models.sync import (
    RemoteSnapshot,
    SyncResult,
    SyncStatus,
)
from src.models.plans import (
    WEEKLY_PLAN,
    DayPlan,
    PlannedExercise,
    default_record,
    get_plan,
)

__all__ = [
    # Workout models
    "SessionKind",
    "Snapshot",
    "WorkoutRecord",
    "snapshot_from_json",
    "snapshot_to_json",
    # Sync models
    "RemoteSnapshot",
    "SyncResult",
    "SyncStatus",
    # Plans
    "WEEKLY_PLAN",
    "DayPlan",
    "PlannedExercise",
    "default_record",
    "get_plan",
]
