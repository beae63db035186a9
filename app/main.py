"""
Command-line Frontend for Hybrid Workout Tracker

A thin collaborator over the storage and sync engine: it reads and
writes records only through WorkoutTracker and shows sync status.

Usage:
    hybrid-workout status
    hybrid-workout complete tuesday
    hybrid-workout sync
    hybrid-workout export --output backup.json
    hybrid-workout import backup.json
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich import print

from src.config import get_settings
from src.log import configure_logging
from src.orchestrator import WorkoutTracker, create_tracker
from src.services.transfer import MalformedImportError


app = typer.Typer(help="hybrid-workout: local-first workout tracker with optional cloud sync")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Override the configured log level"),
) -> None:
    app_settings = get_settings().app
    configure_logging(log_level or app_settings.log_level, json_output=app_settings.log_json)


async def _open_tracker() -> WorkoutTracker:
    tracker = create_tracker()
    await tracker.start()
    return tracker


@app.command()
def status() -> None:
    """Show sync status, device ID and record count."""

    async def _run() -> None:
        tracker = await _open_tracker()
        try:
            sync = tracker.sync_status()
            records = tracker.records.get_all()
            if sync.configured:
                last = sync.last_sync_at.isoformat() if sync.last_sync_at else "never"
                print(f"[green]Cloud sync enabled[/green] (last sync: {last})")
            else:
                print("[yellow]Cloud sync not configured[/yellow] - data is stored on this device only")
            print(f"- Device: {tracker.device_id()}")
            print(f"- Records: {len(records)}")
            weeks = tracker.list_weeks()
            if weeks:
                print(f"- Latest week: {weeks[0]}")
        finally:
            await tracker.close()

    asyncio.run(_run())


@app.command()
def sync() -> None:
    """Push local data to the cloud now."""

    async def _run() -> bool:
        tracker = await _open_tracker()
        try:
            result = await tracker.manual_sync()
        finally:
            await tracker.close()
        if result.success:
            print(f"[green]Synced[/green] at {result.synced_at.isoformat()}")
            return True
        print(f"[red]Sync failed:[/red] {result.error}")
        return False

    if not asyncio.run(_run()):
        raise typer.Exit(code=1)


@app.command()
def show(date_key: str = typer.Argument(..., help="Day to show (YYYY-MM-DD)")) -> None:
    """Print one day's record as JSON."""

    async def _run() -> Optional[dict]:
        tracker = await _open_tracker()
        try:
            record = tracker.get_day(date_key)
        finally:
            await tracker.close()
        return record.to_document() if record else None

    document = asyncio.run(_run())
    if document is None:
        print(f"[yellow]No record for {date_key}[/yellow]")
        raise typer.Exit(code=1)
    print(json.dumps(document, indent=2))


@app.command()
def complete(
    day: str = typer.Argument(..., help="Weekday label, e.g. tuesday"),
    week: Optional[str] = typer.Option(None, help="Week anchor key (defaults to today)"),
    notes: Optional[str] = typer.Option(None, help="Notes to attach"),
    undo: bool = typer.Option(False, help="Mark as not completed instead"),
) -> None:
    """Mark a day's session as completed in the current (or given) week."""

    async def _run() -> bool:
        tracker = await _open_tracker()
        try:
            try:
                record = tracker.open_day(day, week_key=week)
            except ValueError as e:
                print(f"[red]{e}[/red]")
                return False
            payload = dict(record.payload)
            if notes is not None:
                payload["notes"] = notes
            updated = record.model_copy(update={"completed": not undo, "payload": payload})
            saved = tracker.save_day(updated)
            if saved:
                print(f"[green]Saved[/green] {updated.date_key} ({updated.kind.value})")
            else:
                print("[red]Could not save - local storage failed[/red]")
            return saved
        finally:
            await tracker.close()

    if not asyncio.run(_run()):
        raise typer.Exit(code=1)


@app.command("export")
def export_cmd(
    output: Optional[Path] = typer.Option(None, help="Output file (defaults to workout-data-<today>.json)"),
) -> None:
    """Export all records to a JSON backup file."""

    async def _run() -> tuple[str, str]:
        tracker = await _open_tracker()
        try:
            return tracker.export_document(), tracker.export_filename()
        finally:
            await tracker.close()

    document, default_name = asyncio.run(_run())
    path = output or Path(default_name)
    path.write_text(document, encoding="utf-8")
    print(f"[green]Exported[/green] to {path}")


@app.command("import")
def import_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Backup file to restore"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Replace all records with the contents of a backup file."""
    document = path.read_bytes()

    async def _run() -> bool:
        tracker = await _open_tracker()
        try:
            try:
                snapshot = tracker.preview_import(document)
            except MalformedImportError as e:
                print(f"[red]Error importing data:[/red] {e}")
                return False
            if not yes and not typer.confirm(
                f"This will replace all your current workout data with {len(snapshot)} records. Are you sure?"
            ):
                print("Import cancelled")
                return True
            saved = tracker.confirm_import(snapshot)
            if saved:
                print(f"[green]Imported[/green] {len(snapshot)} records")
            else:
                print("[red]Could not save imported data - local storage failed[/red]")
            return saved
        finally:
            await tracker.close()

    if not asyncio.run(_run()):
        raise typer.Exit(code=1)


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")) -> None:
    """
    Delete all local records (the cloud copy is not touched).

    With cloud sync enabled the records come back on the next start,
    when the cloud copy is pulled and merged.
    """
    if not yes:
        typer.confirm("Are you sure you want to clear all workout data? This cannot be undone.", abort=True)
        typer.confirm("This is your last chance. All data will be permanently deleted.", abort=True)

    async def _run() -> bool:
        tracker = await _open_tracker()
        try:
            return tracker.clear_all()
        finally:
            await tracker.close()

    if not asyncio.run(_run()):
        print("[red]Could not clear local data[/red]")
        raise typer.Exit(code=1)
    print("All data cleared.")


@app.command("device-id")
def device_id(reset: bool = typer.Option(False, help="Generate a new device ID")) -> None:
    """Show (or reset) this installation's device ID."""

    async def _run() -> str:
        tracker = await _open_tracker()
        try:
            return tracker.reset_device_id() if reset else tracker.device_id()
        finally:
            await tracker.close()

    print(asyncio.run(_run()))


if __name__ == "__main__":
    app()
