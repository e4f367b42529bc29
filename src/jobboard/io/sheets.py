# src/jobboard/io/sheets.py
"""
Data-source side of the job board: fetch the JobBoard sheet and hand back a
parsed Table.

Three ways in, tried in this order by `load_table`:
1. a published CSV URL (gviz `out:csv` or `export?format=csv`),
2. the Sheets values API with an API key,
3. gspread with a service account for private sheets.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

import gspread
import httpx

from jobboard.clients.http import get_json, get_text
from jobboard.config import Settings
from jobboard.errors import DataSourceError
from jobboard.models import Table
from jobboard.pipeline.parse import DelimitedTextSource, TabularSource, ValuesArraySource

logger = logging.getLogger(__name__)

SHEETS_API = "https://sheets.googleapis.com/v4/spreadsheets"


def csv_export_url(sheet_id: str, gid: str | int) -> str:
    return f"https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"


def gviz_csv_url(sheet_id: str, sheet_name: Optional[str] = None) -> str:
    url = f"https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:csv"
    if sheet_name:
        url += f"&sheet={quote(sheet_name)}"
    return url


def values_api_url(sheet_id: str, value_range: str) -> str:
    return f"{SHEETS_API}/{sheet_id}/values/{quote(value_range, safe='!:')}"


def fetch_csv_text(url: str, *, timeout: float = 20) -> str:
    try:
        text = get_text(url, timeout=timeout)
    except httpx.HTTPError as e:
        raise DataSourceError(f"Could not fetch sheet CSV: {e}") from e
    if not text.strip():
        raise DataSourceError("Sheet CSV export was empty")
    return text


def fetch_values(
    sheet_id: str,
    api_key: str,
    value_range: str,
    *,
    major_dimension: str = "ROWS",
    timeout: float = 20,
) -> Dict[str, Any]:
    """Raw Sheets API values payload: {"range", "majorDimension", "values"}."""
    params = {"majorDimension": major_dimension, "key": api_key}
    try:
        payload = get_json(values_api_url(sheet_id, value_range), params, timeout=timeout)
    except httpx.HTTPError as e:
        raise DataSourceError(f"Google Sheets API error: {e}") from e
    if not isinstance(payload, dict) or not payload.get("values"):
        raise DataSourceError("Google Sheets API returned no values")
    return payload


def read_values_with_gspread(sheet_id: str, gid: int, service_account_file: str) -> Dict[str, Any]:
    try:
        gc = gspread.service_account(filename=service_account_file)
        sh = gc.open_by_key(sheet_id)
        ws = next((ws for ws in sh.worksheets() if ws.id == gid), None)
        if ws is None:
            raise DataSourceError(f"No worksheet with gid={gid}")
        values = ws.get_all_values()  # list[list[str]], header first
    except (gspread.exceptions.GSpreadException, OSError, ValueError) as e:
        raise DataSourceError(f"gspread could not read sheet: {e}") from e
    return {"values": values, "majorDimension": "ROWS"}


def read_source_file(path: str | Path) -> TabularSource:
    """Local snapshot: a `.json` values payload or delimited text."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataSourceError(f"Could not read {path}: {e}") from e
    if path.suffix.lower() == ".json":
        try:
            return ValuesArraySource(json.loads(text))
        except json.JSONDecodeError as e:
            raise DataSourceError(f"{path} is not valid JSON: {e}") from e
    return DelimitedTextSource(text)


def open_source(settings: Settings) -> TabularSource:
    if settings.csv_url:
        logger.info("Loading jobs from CSV export")
        return DelimitedTextSource(fetch_csv_text(settings.csv_url, timeout=settings.http_timeout))
    if not settings.sheet_id:
        raise DataSourceError("Set JOBBOARD_CSV_URL or JOBBOARD_SHEET_ID (in .env).")
    if settings.api_key:
        logger.info("Loading jobs from Sheets values API")
        payload = fetch_values(
            settings.sheet_id,
            settings.api_key,
            settings.values_range,
            timeout=settings.http_timeout,
        )
        return ValuesArraySource(payload)
    logger.info("Loading jobs via gspread service account")
    return ValuesArraySource(
        read_values_with_gspread(settings.sheet_id, settings.gid, settings.service_account_file)
    )


def load_table(settings: Settings) -> Table:
    """Fetch and parse the sheet. Any transport problem is a DataSourceError."""
    return open_source(settings).table()
