"""
Google Sheets Remote Store

DESIGN DECISION: Google Sheets is used as the remote durable store because:
1. The user can look at their synced data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Layout of the sync worksheet (one row per device):

    device_id | updated_at | data | data (cont.) | ...

TRADEOFFS:
- A Sheets cell holds at most 50,000 characters, so the serialized
  snapshot is split across consecutive cells and joined on read
- No transactions: an upsert rewrites the device's whole row, which is
  fine because only one device ever writes its own row
- gspread is synchronous, so calls run in a worker thread with a bounded
  per-request timeout plus an overall deadline. A call that misses the
  deadline keeps running in its thread, so a timed-out push may still
  land after a newer one; the last push to complete wins
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional, TypeVar

import gspread
import requests
import structlog
from google.auth import exceptions as auth_exceptions
from google.oauth2.service_account import Credentials
from gspread.utils import rowcol_to_a1
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import GoogleSheetsSettings, get_settings
from src.models.sync import RemoteSnapshot
from src.models.workout import Snapshot, snapshot_from_json, snapshot_to_json
from src.services.remote.interface import (
    RemoteRejectedError,
    RemoteStoreInterface,
    RemoteSyncError,
    RemoteUnavailableError,
)


logger = structlog.get_logger(__name__)

T = TypeVar("T")

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

SYNC_COLUMNS = ["device_id", "updated_at", "data"]

# Sheets rejects cells longer than 50,000 characters
CHUNK_SIZE = 45_000


def split_chunks(data: str, size: int = CHUNK_SIZE) -> list[str]:
    """Split serialized data into cell-sized pieces (at least one)."""
    if not data:
        return [""]
    return [data[i:i + size] for i in range(0, len(data), size)]


def translate_error(error: Exception, operation: str) -> RemoteSyncError:
    """Map gspread/google-auth/requests failures onto the sync error taxonomy."""
    if isinstance(error, RemoteSyncError):
        return error

    if isinstance(error, gspread.exceptions.APIError):
        response = getattr(error, "response", None)
        status = getattr(response, "status_code", None)
        if status is None or status == 429 or status >= 500:
            return RemoteUnavailableError(f"Google Sheets {operation} failed ({status}): {error}")
        return RemoteRejectedError(f"Google Sheets rejected {operation} ({status}): {error}")

    if isinstance(error, (gspread.exceptions.SpreadsheetNotFound, gspread.exceptions.WorksheetNotFound)):
        return RemoteRejectedError(f"Google Sheets {operation} failed: spreadsheet not found")

    if isinstance(error, auth_exceptions.RefreshError):
        return RemoteRejectedError(f"Google Sheets credentials rejected: {error}")

    if isinstance(
        error,
        (auth_exceptions.TransportError, requests.exceptions.RequestException, OSError),
    ):
        return RemoteUnavailableError(f"Google Sheets unreachable during {operation}: {error}")

    return RemoteUnavailableError(f"Google Sheets {operation} failed: {error}")


def _parse_timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication, request timeouts and finding the sync worksheet.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            path = self._settings.credentials_path
            try:
                credentials = Credentials.from_service_account_file(
                    path,
                    scopes=SCOPES,
                )
            except FileNotFoundError:
                raise RemoteRejectedError(f"Google credentials file not found: {path}")
            except ValueError as e:
                raise RemoteRejectedError(f"Invalid Google credentials file {path}: {e}")

            client = gspread.authorize(credentials)
            client.set_timeout(self._settings.timeout_seconds)
            self._client = client

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(self._settings.spreadsheet_id)
            except gspread.SpreadsheetNotFound:
                raise RemoteRejectedError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_sync_sheet(self) -> gspread.Worksheet:
        """Get or create the sync worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.sync_sheet_name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=self._settings.sync_sheet_name,
                rows=100,
                cols=len(SYNC_COLUMNS),
            )
            sheet.append_row(SYNC_COLUMNS)
        return sheet


class GoogleSheetsRemoteStore(RemoteStoreInterface):
    """
    Google Sheets implementation of the remote store.

    Connectivity failures are retried once before surfacing as
    RemoteUnavailableError; rejections surface immediately.
    """

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        settings: Optional[GoogleSheetsSettings] = None,
    ):
        self._settings = settings or get_settings().google_sheets
        self._client = client or GoogleSheetsClient(self._settings)

    def is_configured(self) -> bool:
        return self._settings.is_configured

    async def push(self, device_id: str, snapshot: Snapshot) -> datetime:
        data = snapshot_to_json(snapshot)
        updated_at = await self._run("push", self._push_row, device_id, data)
        logger.info("remote_push_completed", device_id=device_id, records=len(snapshot))
        return updated_at

    async def pull(self, device_id: str) -> Optional[RemoteSnapshot]:
        remote = await self._run("pull", self._pull_row, device_id)
        logger.info(
            "remote_pull_completed",
            device_id=device_id,
            found=remote is not None,
        )
        return remote

    async def _run(self, operation: str, func: Callable[..., T], *args) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args),
                timeout=self._settings.operation_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise RemoteUnavailableError(
                f"Google Sheets {operation} timed out after "
                f"{self._settings.operation_timeout_seconds:g}s"
            ) from e

    def _find_row(self, sheet: gspread.Worksheet, device_id: str) -> Optional[int]:
        """1-based row index of the device's row (row 1 is the header)."""
        for index, value in enumerate(sheet.col_values(1)[1:], start=2):
            if value == device_id:
                return index
        return None

    def _ensure_columns(self, sheet: gspread.Worksheet, width: int) -> None:
        if sheet.col_count < width:
            sheet.add_cols(width - sheet.col_count)

    @retry(
        retry=retry_if_exception_type(RemoteUnavailableError),
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        reraise=True,
    )
    def _push_row(self, device_id: str, data: str) -> datetime:
        """Upsert the device's row, blanking chunks left over from a longer push."""
        updated_at = datetime.now(timezone.utc)
        row = [device_id, updated_at.isoformat(), *split_chunks(data)]

        try:
            sheet = self._client.get_sync_sheet()
            row_index = self._find_row(sheet, device_id)

            if row_index is None:
                self._ensure_columns(sheet, len(row))
                sheet.append_row(row, value_input_option="RAW", table_range="A1")
            else:
                width = max(len(row), len(sheet.row_values(row_index)))
                row.extend([""] * (width - len(row)))
                self._ensure_columns(sheet, width)
                sheet.update(
                    range_name=f"A{row_index}:{rowcol_to_a1(row_index, width)}",
                    values=[row],
                    value_input_option="RAW",
                )
        except Exception as e:
            raise translate_error(e, "push") from e

        return updated_at

    @retry(
        retry=retry_if_exception_type(RemoteUnavailableError),
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        reraise=True,
    )
    def _pull_row(self, device_id: str) -> Optional[RemoteSnapshot]:
        try:
            sheet = self._client.get_sync_sheet()
            row_index = self._find_row(sheet, device_id)
            if row_index is None:
                # No row yet is a normal state, not an error
                return None
            values = sheet.row_values(row_index)
        except Exception as e:
            raise translate_error(e, "pull") from e

        updated_at = _parse_timestamp(values[1] if len(values) > 1 else "")
        data = "".join(values[2:])
        if not data.strip():
            return RemoteSnapshot(records={}, updated_at=updated_at)

        try:
            records = snapshot_from_json(data)
        except ValueError as e:
            raise RemoteRejectedError(f"Remote snapshot for {device_id} is malformed: {e}") from e

        return RemoteSnapshot(records=records, updated_at=updated_at)
