# src/jobboard/pipeline/sort.py
"""Field-aware, stable ordering of job records."""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from jobboard.models import JobRecord

ASC = "asc"
DESC = "desc"

# Sheet header text -> record attribute
FIELD_ALIASES: Dict[str, str] = {
    "date": "posted_date",
    "employer": "employer",
    "job title": "job_title",
    "pathway": "pathway",
    "language": "languages",
    "salary range": "salary",
    "salary_range": "salary",
    "contact person": "contact_person",
    "location": "location",
    "apply": "apply_link",
}

SORTABLE_FIELDS = (
    "posted_date",
    "employer",
    "job_title",
    "pathway",
    "languages",
    "salary",
    "contact_person",
    "location",
    "apply_link",
)

_DIGITS = re.compile(r"(\d+)")


def resolve_field(name: str) -> str:
    key = name.strip()
    field = FIELD_ALIASES.get(key.lower(), key)
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by {name!r}")
    return field


def _text_key(value: str) -> Tuple[str, str]:
    # letters compare case-insensitively first, lowercase before uppercase on ties
    return (value.casefold(), value.swapcase())


def natural_key(value: str) -> tuple:
    """"Job 2" < "Job 10": digit runs compare as numbers."""
    parts = _DIGITS.split(value)
    return tuple(int(p) if i % 2 else _text_key(p) for i, p in enumerate(parts))


def _date_key(record: JobRecord):
    d = record.posted_date
    return (d is not None, d.toordinal() if d else 0)


def _salary_key(record: JobRecord):
    avg = record.salary_range.avg
    return (avg is not None, avg or 0.0)


def _languages_key(record: JobRecord):
    return _text_key(", ".join(record.languages))


def key_for(field: str) -> Callable[[JobRecord], object]:
    field = resolve_field(field)
    if field == "posted_date":
        return _date_key
    if field == "salary":
        return _salary_key
    if field == "languages":
        return _languages_key
    return lambda r: natural_key(getattr(r, field) or "")


def sort_jobs(records: Iterable[JobRecord], field: Optional[str], direction: str = ASC) -> List[JobRecord]:
    """
    Stable sort by `field`; ties keep their input order in both directions.
    With no field the input order is returned unchanged.
    """
    if not field:
        return list(records)
    if direction not in (ASC, DESC):
        raise ValueError(f"Unknown sort direction: {direction!r}")
    return sorted(records, key=key_for(field), reverse=direction == DESC)


def toggle_sort(current_field: Optional[str], current_direction: str, field: str) -> Tuple[str, str]:
    """Same column flips the direction; a new column starts ascending."""
    field = resolve_field(field)
    if current_field and resolve_field(current_field) == field:
        return field, DESC if current_direction == ASC else ASC
    return field, ASC
