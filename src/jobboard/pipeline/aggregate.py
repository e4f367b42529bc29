# src/jobboard/pipeline/aggregate.py
"""
Summary statistics and chart series over a set of job records.

Everything here is read-only and happy with an empty input: counts come back
as zero and salary figures as the NO_DATA sentinel.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Union

from jobboard.models import NO_DATA, JobRecord, SalaryBounds, Stats
from jobboard.pipeline.filter import location_label, resolve_selection

RECENT_DAYS = 30


@dataclass
class ChartSeries:
    """Labelled numbers handed to a chart renderer."""

    labels: List[str]
    values: List[float]

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.labels, self.values))


def salary_bounds(records: Iterable[JobRecord]) -> Union[SalaryBounds, str]:
    lows: List[float] = []
    highs: List[float] = []
    avgs: List[float] = []
    for r in records:
        sal = r.salary_range
        if sal.min is None:
            continue
        lows.append(sal.min)
        highs.append(sal.effective_max)
        avgs.append(sal.avg)
    if not lows:
        return NO_DATA
    return SalaryBounds(min=min(lows), max=max(highs), avg=sum(avgs) / len(avgs))


def language_frequency(records: Iterable[JobRecord], selected: Sequence[str] = ()) -> Dict[str, int]:
    """
    Occurrences of each language token, in first-seen order.

    With a language selection in effect only the selected languages are
    counted.
    """
    only = resolve_selection(selected)
    counts: Dict[str, int] = {}
    for r in records:
        for lang in r.languages:
            if only is not None and lang not in only:
                continue
            counts[lang] = counts.get(lang, 0) + 1
    return counts


def location_frequency(records: Iterable[JobRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for r in records:
        loc = location_label(r)
        counts[loc] = counts.get(loc, 0) + 1
    return counts


def salary_by_location(records: Iterable[JobRecord]) -> Dict[str, float]:
    """Sum of average salary per location; records without salary add nothing."""
    totals: Dict[str, float] = {}
    for r in records:
        loc = location_label(r)
        totals.setdefault(loc, 0.0)
        if r.salary_range.avg is not None:
            totals[loc] += r.salary_range.avg
    return totals


def location_shares(totals: Dict[str, float]) -> Dict[str, float]:
    """Each location's fraction of the grand total; zero totals are left out."""
    grand = sum(totals.values())
    if grand <= 0:
        return {}
    return {loc: total / grand for loc, total in totals.items() if total > 0}


def count_recent(records: Iterable[JobRecord], as_of: date, days: int = RECENT_DAYS) -> int:
    cutoff = as_of - timedelta(days=days)
    return sum(1 for r in records if r.posted_date is not None and r.posted_date >= cutoff)


def aggregate(records: Sequence[JobRecord], as_of: Optional[date] = None) -> Stats:
    records = list(records)
    totals = salary_by_location(records)
    return Stats(
        count=len(records),
        salary_range=salary_bounds(records),
        language_frequency=language_frequency(records),
        location_frequency=location_frequency(records),
        salary_by_location=totals,
        location_shares=location_shares(totals),
        recent_count=count_recent(records, as_of or date.today()),
    )


# --- chart series ---------------------------------------------------------


def location_share_series(records: Iterable[JobRecord]) -> ChartSeries:
    shares = location_shares(salary_by_location(records))
    return ChartSeries(labels=list(shares), values=[v * 100 for v in shares.values()])


def language_series(records: Iterable[JobRecord], selected: Sequence[str] = ()) -> ChartSeries:
    counts = language_frequency(records, selected)
    return ChartSeries(labels=list(counts), values=[float(c) for c in counts.values()])


def salary_bar_series(records: Iterable[JobRecord]) -> ChartSeries:
    """Min / Average / Max of positive average salaries (zeros when none)."""
    avgs = [r.salary_range.avg for r in records if r.salary_range.avg is not None and r.salary_range.avg > 0]
    if not avgs:
        return ChartSeries(labels=["Min", "Average", "Max"], values=[0.0, 0.0, 0.0])
    return ChartSeries(
        labels=["Min", "Average", "Max"],
        values=[min(avgs), sum(avgs) / len(avgs), max(avgs)],
    )
