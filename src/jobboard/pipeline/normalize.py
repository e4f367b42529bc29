# src/jobboard/pipeline/normalize.py
"""
Convert header + raw rows from the sheet into JobRecord objects.

The header row decides how each column is coerced, so adding, removing or
reordering columns in the sheet degrades gracefully: unknown columns are
kept as text in `JobRecord.extras`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Sequence

from jobboard.models import Diagnostic, JobRecord, RawRow, SalaryRange, Table

logger = logging.getLogger(__name__)

TEXT = "text"
DATE = "date"
BOOLEAN = "boolean"
CURRENCY_RANGE = "currencyRange"
STRING_LIST = "stringList"

# Text headers we know how to place on the record
TEXT_FIELDS = {
    "employer": "employer",
    "job title": "job_title",
    "pathway": "pathway",
    "contact person": "contact_person",
    "location": "location",
    "apply": "apply_link",
}

_DATE_RE = re.compile(r"^(0[1-9]|1[0-2])/(0[1-9]|[12][0-9]|3[01])/(\d{4})$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)")


@dataclass
class NormalizeResult:
    records: List[JobRecord] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def _key(header_cell: str) -> str:
    return header_cell.strip().lower()


def field_rule(header_cell: str) -> str:
    """Coercion rule for a header cell; unknown headers are plain text."""
    key = _key(header_cell)
    if key == "date":
        return DATE
    if key == "deactivate?":
        return BOOLEAN
    if "salary" in key:
        return CURRENCY_RANGE
    if key == "language":
        return STRING_LIST
    return TEXT


def parse_date(value: str) -> Optional[date]:
    """
    Parse a strict zero-padded MM/DD/YYYY date.

    Impossible calendar dates like 02/30/2024 give None, as does anything
    that isn't in that exact format.
    """
    match = _DATE_RE.match((value or "").strip())
    if not match:
        return None
    mm, dd, yyyy = (int(g) for g in match.groups())
    try:
        return date(yyyy, mm, dd)
    except ValueError:
        return None


def _parse_number(segment: str) -> Optional[float]:
    # leading numeric prefix only: "80000 (DOE)" -> 80000
    match = _NUMBER_RE.match(segment.strip())
    if not match:
        return None
    return float(match.group(0))


def parse_salary_range(value: str) -> SalaryRange:
    """
    "$60,000 - $80,000" -> SalaryRange(60000, 80000); "$60,000" -> (60000, None).

    Segments that don't start with a number become None.
    """
    cleaned = re.sub(r"[$,]", "", (value or "").strip())
    if not cleaned:
        return SalaryRange()
    parts = cleaned.split("-")
    low = _parse_number(parts[0])
    high = _parse_number(parts[1]) if len(parts) > 1 else None
    return SalaryRange(min=low, max=high)


def parse_deactivated(value: str) -> bool:
    # Only an explicit "false" keeps a job visible; blanks and typos hide it.
    return (value or "").strip().lower() != "false"


def parse_languages(value: str) -> List[str]:
    return [token.strip() for token in (value or "").split(",") if token.strip()]


def _is_populated(record: JobRecord) -> bool:
    return bool(
        record.posted_date
        or record.employer
        or record.job_title
        or record.pathway
        or record.languages
        or record.salary_range.min is not None
        or record.contact_person
        or record.location
        or record.apply_link
        or any(record.extras.values())
    )


def build_record(header: Sequence[str], row: RawRow, row_number: int = 0) -> JobRecord:
    """Apply the header-driven coercion rules to one full-width row."""
    record = JobRecord(row_number=row_number)
    for index, header_cell in enumerate(header):
        cell = row[index].strip()
        rule = field_rule(header_cell)
        if rule == DATE:
            record.posted_date = parse_date(cell)
        elif rule == BOOLEAN:
            record.is_deactivated = parse_deactivated(cell)
        elif rule == CURRENCY_RANGE:
            record.salary_range = parse_salary_range(cell)
        elif rule == STRING_LIST:
            record.languages = parse_languages(cell)
        else:
            attr = TEXT_FIELDS.get(_key(header_cell))
            if attr == "location":
                # sheet uses Northern_KY style tokens for locations
                cell = cell.replace("_", " ")
            if attr:
                setattr(record, attr, cell)
            else:
                record.extras[header_cell.strip()] = cell
    return record


def normalize(header: Sequence[str], rows: Iterable[RawRow], row_numbers: Optional[Sequence[int]] = None) -> NormalizeResult:
    """
    Build JobRecords from `rows`, skipping (and reporting) anything unusable.

    Never raises for bad data: short rows and rows with nothing in them are
    dropped, empty cells are recorded, and whatever could be built is returned.
    """
    result = NormalizeResult()
    rows = list(rows)
    numbers = list(row_numbers) if row_numbers else list(range(2, len(rows) + 2))

    for row_number, row in zip(numbers, rows):
        if len(row) < len(header):
            diag = Diagnostic(
                kind="short_row",
                row=row_number,
                message=f"Skipping malformed row {row_number}: expected {len(header)} columns, got {len(row)}",
                expected=len(header),
                actual=len(row),
            )
            logger.warning(diag.message)
            result.diagnostics.append(diag)
            continue

        for index, header_cell in enumerate(header):
            if not row[index].strip():
                diag = Diagnostic(
                    kind="empty_cell",
                    row=row_number,
                    column=header_cell,
                    message=f"Empty cell at row {row_number}, col {index} ({header_cell})",
                )
                logger.debug(diag.message)
                result.diagnostics.append(diag)

        record = build_record(header, row, row_number)
        if not _is_populated(record):
            diag = Diagnostic(kind="empty_row", row=row_number, message=f"Skipping empty row {row_number}")
            logger.warning(diag.message)
            result.diagnostics.append(diag)
            continue
        result.records.append(record)

    logger.info("Normalized %d records from %d rows", len(result.records), len(rows))
    return result


def normalize_table(table: Table) -> NormalizeResult:
    """Normalize a parsed table, carrying over the parser's diagnostics."""
    result = normalize(table.header, table.rows, table.row_numbers)
    result.diagnostics = list(table.diagnostics) + result.diagnostics
    return result


def get_active_jobs(records: Iterable[JobRecord]) -> List[JobRecord]:
    """Drop deactivated jobs."""
    return [r for r in records if not r.is_deactivated]
