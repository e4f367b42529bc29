# src/jobboard/render.py
"""
Display helpers: turn JobRecords into the strings a table or chart shows.

Tables are built as pandas DataFrames so the CLI can print them
(`to_string`) or write them out (`to_csv`) without extra formatting code.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, Optional, Sequence

import pandas as pd

from jobboard.models import JobRecord, SalaryRange

NOT_PROVIDED = "Not Provided"

LIST_COLUMNS = [
    "Date", "Employer", "Job Title", "Pathway", "Language",
    "Salary Range", "Contact Person", "Location", "Apply",
]
DASHBOARD_COLUMNS = ["Job Title", "Language", "Salary Range", "Location"]


def format_dollar(amount: Optional[float]) -> str:
    if amount is None:
        return NOT_PROVIDED
    return f"${amount:,.0f}"


def salary_text(salary: SalaryRange) -> str:
    text = format_dollar(salary.min)
    if salary.min is not None and salary.max is not None:
        text += f" - {format_dollar(salary.max)}"
    return text


def apply_text(record: JobRecord) -> str:
    """Link when the cell looks like a URL, blank for "false", else the raw text."""
    url = record.apply_url
    if url:
        return url
    raw = record.apply_link.strip()
    return "" if raw.lower() == "false" else raw


def date_text(record: JobRecord) -> str:
    return record.posted_date.strftime("%m/%d/%Y") if record.posted_date else ""


COLUMN_TEXT: Dict[str, Callable[[JobRecord], str]] = {
    "Date": date_text,
    "Employer": lambda r: r.employer,
    "Job Title": lambda r: r.job_title,
    "Pathway": lambda r: r.pathway,
    "Language": lambda r: ", ".join(r.languages),
    "Salary Range": lambda r: salary_text(r.salary_range),
    "Contact Person": lambda r: r.contact_person,
    "Location": lambda r: r.location,
    "Apply": apply_text,
}


def records_frame(records: Iterable[JobRecord], columns: Sequence[str] = LIST_COLUMNS) -> pd.DataFrame:
    """One row per record, one display-string column per entry in `columns`."""
    getters = [(c, COLUMN_TEXT.get(c, lambda r, c=c: r.extras.get(c, ""))) for c in columns]
    rows = [{name: get(r) for name, get in getters} for r in records]
    return pd.DataFrame(rows, columns=list(columns))


def short_location_label(full_label: str) -> str:
    """Compact chart label for a location, e.g. "Northern Kentucky" -> "NKY"."""
    if not full_label:
        return ""
    s = full_label.lower()
    if "northern" in s or "nky" in s or "north" in s:
        return "NKY"
    if "eastern" in s or "eky" in s or "east" in s:
        return "EKY"
    if "central" in s or "cky" in s or "center" in s or "centre" in s:
        return "CKY"
    if "indiana" in s:
        return "S. Indiana"
    if "louisville" in s or "lou" in s:
        return "Louisville"
    if "remote" in s:
        return "Remote"
    return " ".join(re.split(r"\s+", full_label.strip())[:2])
