# src/jobboard/models.py
"""
Typed records for job listings after they come out of the sheet.

Raw rows are plain lists of strings; everything downstream of the
normalizer works on these fixed-shape dataclasses instead of dicts keyed by
header text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Union

RawRow = List[str]

# Sentinel for aggregates computed over records without any salary data
NO_DATA = "no data"

# How far into the apply cell we look for "http" before treating it as a link
_URL_PREFIX_WINDOW = 5


@dataclass(frozen=True)
class SalaryRange:
    """
    Parsed "Salary Range" cell, e.g. "$60,000 - $80,000".

    Notes:
    - `min` is None when the cell had no usable number; such a record is left
      out of every salary aggregate.
    - `max` is None for single-figure cells like "$60,000".
    """

    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def effective_max(self) -> Optional[float]:
        return self.max if self.max is not None else self.min

    @property
    def avg(self) -> Optional[float]:
        if self.min is None:
            return None
        return (self.min + self.effective_max) / 2


@dataclass
class JobRecord:
    """One normalized job listing row."""

    # Posting date, None when the cell was missing or not MM/DD/YYYY
    posted_date: Optional[date] = None

    employer: str = ""
    job_title: str = ""
    pathway: str = ""

    # Comma list from the "Language" column, order kept, duplicates allowed
    languages: List[str] = field(default_factory=list)

    salary_range: SalaryRange = field(default_factory=SalaryRange)
    contact_person: str = ""
    location: str = ""

    # Anything that is not exactly "false" hides the job
    is_deactivated: bool = True

    # Raw "Apply" cell; see apply_url
    apply_link: str = ""

    # Columns we don't recognize, keyed by their header text
    extras: Dict[str, str] = field(default_factory=dict)

    # 1-based position in the source (header is row 1)
    row_number: int = 0

    @property
    def apply_url(self) -> Optional[str]:
        link = self.apply_link.strip()
        idx = link.lower().find("http")
        if 0 <= idx < _URL_PREFIX_WINDOW:
            return link
        return None


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while parsing or normalizing a row."""

    kind: str  # "bad_row" | "short_row" | "empty_cell" | "empty_row"
    row: int
    message: str
    expected: Optional[int] = None
    actual: Optional[int] = None
    column: Optional[str] = None


@dataclass
class Table:
    """Header row plus data rows, as produced by any tabular source."""

    header: RawRow
    rows: List[RawRow]
    # Source row number for each entry in `rows`
    row_numbers: List[int] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass(frozen=True)
class SalaryBounds:
    min: float
    max: float
    avg: float


@dataclass
class Stats:
    count: int
    salary_range: Union[SalaryBounds, str]
    language_frequency: Dict[str, int]
    location_frequency: Dict[str, int]
    salary_by_location: Dict[str, float]
    location_shares: Dict[str, float]
    recent_count: int = 0

    @property
    def has_salary_data(self) -> bool:
        return self.salary_range != NO_DATA
