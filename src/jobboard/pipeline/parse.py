# src/jobboard/pipeline/parse.py
"""
Turn raw sheet data into a rectangular header + rows table.

Two shapes come back from the data source:
- delimited text (the sheet's CSV export), and
- a Sheets API `values` payload: {"values": [[...], ...], "majorDimension": "ROWS"}.

Both end up as a `Table`; rows shorter than the header are dropped here with
a diagnostic instead of failing the whole load.
"""

from __future__ import annotations

import csv
import logging
import re
from abc import ABC, abstractmethod
from itertools import zip_longest
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from jobboard.errors import DataSourceError
from jobboard.models import Diagnostic, RawRow, Table

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def parse_line(line: str) -> RawRow:
    """
    Split one CSV line on commas outside double quotes.

    A doubled quote inside a quoted cell is a literal quote. Cells are trimmed
    after unquoting. Blank lines give an empty list.
    """
    if not line.strip():
        return []
    cells = next(csv.reader([line], skipinitialspace=True))
    return [cell.strip() for cell in cells]


def _numbered_lines(text: str, diagnostics: Optional[List[Diagnostic]] = None) -> Iterator[Tuple[int, RawRow]]:
    for lineno, line in enumerate(_LINE_BREAK.split(text), start=1):
        try:
            row = parse_line(line)
        except csv.Error as e:
            diag = Diagnostic(kind="bad_row", row=lineno, message=f"Skipping unreadable row {lineno}: {e}")
            logger.warning(diag.message)
            if diagnostics is not None:
                diagnostics.append(diag)
            continue
        if any(row):
            yield lineno, row


def parse(text: str) -> List[RawRow]:
    """Parse delimited text into rows; blank and all-empty lines are skipped."""
    return [row for _, row in _numbered_lines(text)]


def _build_table(numbered: Iterable[Tuple[int, RawRow]]) -> Table:
    it = iter(numbered)
    try:
        _, header = next(it)
    except StopIteration:
        raise DataSourceError("Source returned no rows") from None

    # Exports sometimes pad the header with empty trailing columns
    while header and not header[-1]:
        header = header[:-1]

    table = Table(header=header, rows=[], row_numbers=[])
    for row_number, row in it:
        if len(row) < len(header):
            diag = Diagnostic(
                kind="short_row",
                row=row_number,
                message=(
                    f"Skipping malformed row {row_number}: "
                    f"expected {len(header)} columns, got {len(row)}"
                ),
                expected=len(header),
                actual=len(row),
            )
            logger.warning(diag.message)
            table.diagnostics.append(diag)
            continue
        table.rows.append(row)
        table.row_numbers.append(row_number)
    return table


def parse_table(text: str) -> Table:
    """Parse delimited text; the first non-blank line is the header."""
    if not text or not text.strip():
        raise DataSourceError("Source returned an empty document")
    skipped: List[Diagnostic] = []
    table = _build_table(_numbered_lines(text, skipped))
    table.diagnostics = sorted(skipped + table.diagnostics, key=lambda d: d.row)
    return table


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class TabularSource(ABC):
    """Anything that can yield a header row plus data rows of strings."""

    @abstractmethod
    def table(self) -> Table:
        raise NotImplementedError


class DelimitedTextSource(TabularSource):
    def __init__(self, text: str):
        self.text = text

    def table(self) -> Table:
        return parse_table(self.text)


class ValuesArraySource(TabularSource):
    """
    Sheets API `values` response, or a bare list of rows.

    `majorDimension` "COLUMNS" is transposed so each inner list becomes a
    row; the API drops trailing empty cells, so ragged columns are padded.
    """

    def __init__(self, payload: Union[Dict[str, Any], List[Any], None]):
        if isinstance(payload, list):
            # bare array-of-arrays snapshot
            payload = {"values": payload}
        elif payload is None:
            payload = {}
        elif not isinstance(payload, dict):
            raise DataSourceError(f"Unsupported values payload: {type(payload).__name__}")
        self.payload = payload

    def rows(self) -> List[RawRow]:
        values = self.payload.get("values") or []
        if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
            raise DataSourceError("Values payload must be a list of rows")
        if str(self.payload.get("majorDimension", "ROWS")).upper() == "COLUMNS":
            values = [list(r) for r in zip_longest(*values, fillvalue="")]
        return [[_cell_text(c) for c in row] for row in values]

    def table(self) -> Table:
        rows = self.rows()
        if not rows:
            raise DataSourceError("Source returned no values")
        numbered = ((i, row) for i, row in enumerate(rows, start=1) if any(row))
        return _build_table(numbered)
