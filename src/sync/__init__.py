"""Local/remote reconciliation package."""

from src.sync.engine import NOT_CONFIGURED_MESSAGE, ReconciliationEngine
from src.sync.merge import local_wins, merge_snapshots
from src.sync.status import SyncStatusReporter
from src.sync.worker import BackgroundPusher

__all__ = [
    "NOT_CONFIGURED_MESSAGE",
    "BackgroundPusher",
    "ReconciliationEngine",
    "SyncStatusReporter",
    "local_wins",
    "merge_snapshots",
]
