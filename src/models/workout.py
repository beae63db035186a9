"""
Workout Record Models

One WorkoutRecord exists per calendar date key. A Snapshot is the full
`date_key -> WorkoutRecord` mapping held by one store at one instant, and
is the unit that gets persisted, pushed, pulled and merged.

DESIGN DECISION: The engine does not care what a record's payload looks
like. Session-specific fields (exercises, distances, notes...) live in a
free-form `payload` mapping; only the fields the sync engine relies on
are typed.

JSON uses camelCase (`dateKey`, `updatedAt`) so exported documents stay
compatible with the tracker's original web app.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from src.dates import format_key, parse_key


class SessionKind(str, Enum):
    """Categorical tag of a day's session."""
    LIFT = "lift"
    RUN = "run"
    MOBILITY = "mobility"


# Top-level keys a record understands; anything else belongs in payload
_RECORD_KEYS = frozenset({
    "dateKey", "date_key",
    "weekKey", "week_key",
    "dayName", "day_label",
    "kind", "type",
    "payload",
    "completed",
    "updatedAt", "updated_at",
})


class WorkoutRecord(BaseModel):
    """
    A single day's workout record.

    `date_key` and `kind` are fixed at creation. `updated_at` is stamped
    by the local store on every write and drives last-writer-wins merging.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    date_key: str = Field(
        ...,
        alias="dateKey",
        frozen=True,
        description="Canonical YYYY-MM-DD key; the store's primary key"
    )
    week_key: Optional[str] = Field(
        default=None,
        alias="weekKey",
        description="Anchor key of the rolling week the record was opened in"
    )
    day_label: Optional[str] = Field(
        default=None,
        alias="dayName",
        description="Weekday label the record was opened under"
    )
    kind: SessionKind = Field(
        ...,
        validation_alias=AliasChoices("kind", "type"),
        serialization_alias="kind",
        frozen=True,
    )
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Session-specific fields, opaque to the engine"
    )
    completed: bool = False
    updated_at: Optional[datetime] = Field(
        default=None,
        alias="updatedAt",
        description="Time of the last local write"
    )

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_fields(cls, data: Any) -> Any:
        """Move flat, session-specific fields of legacy records into payload."""
        if not isinstance(data, dict):
            return data
        extras = {k: v for k, v in data.items() if k not in _RECORD_KEYS}
        if not extras:
            return data
        folded = {k: v for k, v in data.items() if k in _RECORD_KEYS}
        payload = dict(folded.get("payload") or {})
        for key, value in extras.items():
            payload.setdefault(key, value)
        folded["payload"] = payload
        return folded

    @field_validator("date_key", "week_key")
    @classmethod
    def validate_key(cls, v: Optional[str]) -> Optional[str]:
        # One spelling per date
        if v is not None and format_key(parse_key(v)) != v:
            raise ValueError(f"Date key is not in YYYY-MM-DD form: {v!r}")
        return v

    @field_validator("updated_at")
    @classmethod
    def assume_local_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Naive timestamps are device-local
        if v is not None and v.tzinfo is None:
            return v.astimezone()
        return v

    def to_document(self) -> dict[str, Any]:
        """Convert to the JSON-ready dict used in snapshots and exports."""
        return self.model_dump(mode="json", by_alias=True)


Snapshot = dict[str, WorkoutRecord]

_SNAPSHOT_ADAPTER = TypeAdapter(dict[str, WorkoutRecord])


def snapshot_to_json(snapshot: Snapshot, indent: Optional[int] = None) -> str:
    """Serialize a snapshot, sorted by date key."""
    ordered = {key: snapshot[key] for key in sorted(snapshot)}
    return _SNAPSHOT_ADAPTER.dump_json(ordered, by_alias=True, indent=indent).decode("utf-8")


def snapshot_from_json(text: str | bytes) -> Snapshot:
    """
    Parse a serialized snapshot.

    A record without a dateKey takes it from its mapping key; a record
    whose dateKey disagrees with its key is rejected.

    Raises:
        ValueError: On invalid JSON, a non-object document or an invalid record
            (json.JSONDecodeError and pydantic.ValidationError are ValueErrors)
    """
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Snapshot must be a JSON object keyed by date")

    items: dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, dict) and "dateKey" not in value and "date_key" not in value:
            value = {"dateKey": key, **value}
        items[key] = value

    snapshot = _SNAPSHOT_ADAPTER.validate_python(items)
    for key, record in snapshot.items():
        if record.date_key != key:
            raise ValueError(
                f"Record key {key!r} does not match its dateKey {record.date_key!r}"
            )
    return snapshot
