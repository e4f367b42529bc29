# src/jobboard/pipeline/filter.py
"""
Composable filters over normalized job records.

Every predicate is independent and they are AND-ed together, so the order
they run in never changes the result. Cheap exact-match checks run before
the substring search.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from jobboard.errors import FilterValidationError
from jobboard.models import JobRecord

ALL = "All"
UNKNOWN_LOCATION = "Unknown"
MIN_RANGE_DAYS = 2

# bucket name -> (inclusive lower bound, exclusive upper bound) on avg salary
SALARY_BUCKETS = {
    "<50k": (None, 50_000),
    "50-75k": (50_000, 75_000),
    "75-100k": (75_000, 100_000),
    ">100k": (100_000, None),
}


@dataclass(frozen=True)
class FilterCriteria:
    search: str = ""
    pathway: str = ""
    location: str = ""
    locations: Tuple[str, ...] = (ALL,)
    languages: Tuple[str, ...] = (ALL,)
    salary_bucket: str = ALL
    date_from: Optional[date] = None
    date_to: Optional[date] = None


def resolve_selection(selected: Iterable[str]) -> Optional[List[str]]:
    """
    Effective multi-select values, or None for "match everything".

    "All" only counts when nothing specific is picked alongside it.
    """
    values = [v for v in selected if v]
    if ALL in values and len(values) > 1:
        values = [v for v in values if v != ALL]
    if not values or ALL in values:
        return None
    return values


def toggle_selection(current: Sequence[str], value: str) -> Tuple[str, ...]:
    """
    Chart click semantics: clicking the only selected value clears back to
    "All", clicking anything else selects just that value.
    """
    if list(current) == [value]:
        return (ALL,)
    return (value,)


def validate_date_range(date_from: Optional[date], date_to: Optional[date]) -> None:
    if date_from is None or date_to is None:
        raise FilterValidationError("Please choose both From and To dates.")
    if date_from >= date_to:
        raise FilterValidationError("The From date should be before the To date.")
    if (date_to - date_from).days < MIN_RANGE_DAYS:
        raise FilterValidationError(f"Please select a range of at least {MIN_RANGE_DAYS} days.")


def location_label(record: JobRecord) -> str:
    return record.location or UNKNOWN_LOCATION


def in_salary_bucket(record: JobRecord, bucket: str) -> bool:
    if bucket == ALL:
        return True
    try:
        low, high = SALARY_BUCKETS[bucket]
    except KeyError:
        raise FilterValidationError(f"Unknown salary bucket: {bucket!r}") from None
    avg = record.salary_range.avg
    if avg is None:
        # can't be classified, so it can't be in a specific band
        return False
    if low is not None and avg < low:
        return False
    if high is not None and avg >= high:
        return False
    return True


def matches_search(record: JobRecord, term: str) -> bool:
    term = term.strip().lower()
    if not term:
        return True
    return (
        term in record.employer.lower()
        or term in record.job_title.lower()
        or any(term in lang.lower() for lang in record.languages)
    )


def _predicates(criteria: FilterCriteria) -> List[Callable[[JobRecord], bool]]:
    preds: List[Callable[[JobRecord], bool]] = []

    pathway = criteria.pathway.strip()
    if pathway:
        preds.append(lambda r: r.pathway == pathway)

    location = criteria.location.strip()
    if location:
        preds.append(lambda r: r.location == location)

    locations = resolve_selection(criteria.locations)
    if locations is not None:
        wanted_locations = set(locations)
        preds.append(lambda r: location_label(r) in wanted_locations)

    if criteria.salary_bucket != ALL:
        bucket = criteria.salary_bucket
        if bucket not in SALARY_BUCKETS:
            raise FilterValidationError(f"Unknown salary bucket: {bucket!r}")
        preds.append(lambda r: in_salary_bucket(r, bucket))

    if criteria.date_from is not None or criteria.date_to is not None:
        validate_date_range(criteria.date_from, criteria.date_to)
        start, end = criteria.date_from, criteria.date_to
        preds.append(lambda r: r.posted_date is not None and start <= r.posted_date <= end)

    languages = resolve_selection(criteria.languages)
    if languages is not None:
        wanted_languages = set(languages)
        preds.append(lambda r: any(lang in wanted_languages for lang in r.languages))

    if criteria.search.strip():
        term = criteria.search
        preds.append(lambda r: matches_search(r, term))

    return preds


def filter_options(records: Iterable[JobRecord]) -> Dict[str, List[str]]:
    """
    Choices for the multi-selects, each led by "All".

    Languages and locations are unique and sorted; a blank location is
    offered as "Unknown" and a "-" placeholder is left out.
    """
    records = list(records)
    languages = sorted({lang for r in records for lang in r.languages})
    locations = sorted({location_label(r).strip() for r in records} - {"", "-"})
    return {
        "languages": [ALL, *languages],
        "locations": [ALL, *locations],
        "salary": [ALL, *SALARY_BUCKETS],
    }


def filter_jobs(records: Iterable[JobRecord], criteria: FilterCriteria) -> List[JobRecord]:
    """
    Return the records matching every active criterion, in input order.

    Raises FilterValidationError for bad user input (date range, bucket name)
    before looking at any record.
    """
    preds = _predicates(criteria)
    return [r for r in records if all(p(r) for p in preds)]
