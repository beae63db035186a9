"""
Export / Import

Export writes the full local snapshot as a portable JSON document.
Import parses such a document; the caller shows it to the user and only
replaces local data after an explicit confirmation.

Documents exported by the original web app (flat records with `type`,
`runType`, `exercises`... at the top level) are accepted as-is.
"""

from src.models.workout import Snapshot, snapshot_from_json, snapshot_to_json


class MalformedImportError(Exception):
    """The import document could not be parsed; local data was not touched."""
    pass


def export_document(snapshot: Snapshot) -> str:
    """Serialize a snapshot for backup (pretty-printed JSON)."""
    return snapshot_to_json(snapshot, indent=2)


def export_filename(date_key: str) -> str:
    """Suggested file name for an export made on a given day."""
    return f"workout-data-{date_key}.json"


def parse_import_document(document: str | bytes) -> Snapshot:
    """
    Parse an import document into a snapshot.

    Raises:
        MalformedImportError: If the document is not a valid snapshot
    """
    try:
        return snapshot_from_json(document)
    except ValueError as e:
        raise MalformedImportError(f"Import file is not a valid workout export: {e}") from e
