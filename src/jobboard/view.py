# src/jobboard/view.py
"""
View state and the controller that owns it.

One controller per view (job list or dashboard). It holds the active
records from the last load plus the current filter / sort / page selection,
and recomputes filter -> sort -> paginate -> aggregate on every snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple, Union

from jobboard.errors import DataSourceError, FilterValidationError
from jobboard.models import Diagnostic, JobRecord, Stats
from jobboard.pipeline.aggregate import (
    ChartSeries,
    aggregate,
    language_series,
    location_share_series,
    salary_bar_series,
)
from jobboard.pipeline.filter import ALL, FilterCriteria, filter_jobs, filter_options, toggle_selection
from jobboard.pipeline.normalize import get_active_jobs, normalize_table
from jobboard.pipeline.paginate import (
    DEFAULT_NEIGHBORS,
    clamp_page,
    neighbors_for_width,
    page_range,
    paginate,
    total_pages_for,
)
from jobboard.pipeline.parse import TabularSource
from jobboard.pipeline.sort import ASC, sort_jobs, toggle_sort
from jobboard.render import DASHBOARD_COLUMNS, LIST_COLUMNS

logger = logging.getLogger(__name__)

LOAD_ERROR = "Error loading data"

# toggle_multi_select_value dimension name -> FilterCriteria attribute
_DIMENSIONS = {
    "language": "languages",
    "languages": "languages",
    "location": "locations",
    "locations": "locations",
}


@dataclass(frozen=True)
class ViewState:
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    sort_field: Optional[str] = None
    sort_direction: str = ASC
    page: int = 1
    page_size: int = 10


@dataclass(frozen=True)
class ViewConfig:
    name: str
    columns: Tuple[str, ...]
    default_state: ViewState = field(default_factory=ViewState)
    # Default date filter: the last N days up to as_of; None means no date filter
    recent_window_days: Optional[int] = None

    def initial_state(self, as_of: date) -> ViewState:
        if self.recent_window_days is None:
            return self.default_state
        criteria = replace(
            self.default_state.criteria,
            date_from=as_of - timedelta(days=self.recent_window_days),
            date_to=as_of,
        )
        return replace(self.default_state, criteria=criteria)


LIST_VIEW = ViewConfig(name="jobs", columns=tuple(LIST_COLUMNS))
DASHBOARD_VIEW = ViewConfig(name="dashboard", columns=tuple(DASHBOARD_COLUMNS), recent_window_days=90)


@dataclass
class ViewSnapshot:
    items: List[JobRecord]
    current_page: int
    total_pages: int
    page_range: List[Union[int, str]]
    stats: Stats
    charts: Dict[str, ChartSeries]
    columns: Tuple[str, ...]
    options: Dict[str, List[str]] = field(default_factory=dict)
    warning: Optional[str] = None
    error: Optional[str] = None


class JobBoardController:
    def __init__(
        self,
        view: ViewConfig = LIST_VIEW,
        *,
        page_size: Optional[int] = None,
        viewport_width: Optional[int] = None,
        as_of: Optional[date] = None,
    ):
        self.view = view
        self.as_of = as_of
        self.state = view.initial_state(self.today)
        if page_size is not None:
            self.state = replace(self.state, page_size=page_size)
        self.neighbors = neighbors_for_width(viewport_width) if viewport_width is not None else DEFAULT_NEIGHBORS
        self.records: List[JobRecord] = []
        self.diagnostics: List[Diagnostic] = []
        self.error: Optional[str] = None
        self.warning: Optional[str] = None

    @property
    def today(self) -> date:
        return self.as_of or date.today()

    # --- loading ------------------------------------------------------------

    def load(self, source: TabularSource) -> bool:
        """
        Replace everything with a fresh load from `source`.

        On a data-source failure the previous records are dropped too, so a
        failed load never shows stale data; `error` carries the message.
        """
        self.records = []
        self.diagnostics = []
        self.warning = None
        try:
            table = source.table()
        except DataSourceError as e:
            logger.error("Error loading sheet: %s", e)
            self.error = LOAD_ERROR
            return False

        result = normalize_table(table)
        self.records = get_active_jobs(result.records)
        self.diagnostics = result.diagnostics
        self.error = None
        self.state = replace(self.view.initial_state(self.today), page_size=self.state.page_size)
        logger.info(
            "Loaded %d active jobs (%d skipped rows)",
            len(self.records),
            sum(1 for d in self.diagnostics if d.kind != "empty_cell"),
        )
        return True

    # --- state transitions --------------------------------------------------

    def _filtered(self, criteria: FilterCriteria) -> List[JobRecord]:
        return filter_jobs(self.records, criteria)

    def apply_criteria(self, criteria: FilterCriteria) -> bool:
        """
        Switch to `criteria` and go back to page 1. Invalid input leaves the
        current view untouched and sets `warning`.
        """
        try:
            self._filtered(criteria)
        except FilterValidationError as e:
            self.warning = str(e)
            return False
        self.warning = None
        self.state = replace(self.state, criteria=criteria, page=1)
        return True

    def update_criteria(self, **changes) -> bool:
        return self.apply_criteria(replace(self.state.criteria, **changes))

    def clear_filters(self) -> bool:
        """Every multi-select back to "All"."""
        return self.update_criteria(locations=(ALL,), languages=(ALL,), salary_bucket=ALL)

    def toggle_multi_select_value(self, dimension: str, value: str) -> bool:
        """Chart click on `value`: select just it, or clear back to "All"."""
        try:
            attr = _DIMENSIONS[dimension.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown multi-select dimension: {dimension!r}") from None
        current = getattr(self.state.criteria, attr)
        return self.update_criteria(**{attr: toggle_selection(current, value)})

    def sort_by(self, field_name: str) -> None:
        sort_field, direction = toggle_sort(self.state.sort_field, self.state.sort_direction, field_name)
        self.state = replace(self.state, sort_field=sort_field, sort_direction=direction, page=1)

    def _total_pages(self) -> int:
        return total_pages_for(len(self._filtered(self.state.criteria)), self.state.page_size)

    def go_to_page(self, page: int) -> None:
        total = self._total_pages()
        self.state = replace(self.state, page=min(max(1, page), total))

    def prompt_page(self, raw: str) -> None:
        """Page number typed after clicking an ellipsis."""
        self.state = replace(self.state, page=clamp_page(raw, self.state.page, self._total_pages()))

    # --- output -------------------------------------------------------------

    def visible_records(self) -> List[JobRecord]:
        filtered = self._filtered(self.state.criteria)
        return sort_jobs(filtered, self.state.sort_field, self.state.sort_direction)

    def snapshot(self) -> ViewSnapshot:
        ordered = self.visible_records()
        page = paginate(ordered, self.state.page, self.state.page_size)
        charts = {
            "locations": location_share_series(ordered),
            "languages": language_series(ordered, self.state.criteria.languages),
            "salary": salary_bar_series(ordered),
        }
        return ViewSnapshot(
            items=page.items,
            current_page=page.page,
            total_pages=page.total_pages,
            page_range=page_range(page.page, page.total_pages, self.neighbors),
            stats=aggregate(ordered, self.today),
            charts=charts,
            columns=self.view.columns,
            options=filter_options(self.records),
            warning=self.warning,
            error=self.error,
        )
