from __future__ import annotations

from datetime import date

import pytest

from jobboard.errors import DataSourceError
from jobboard.models import NO_DATA, Table
from jobboard.pipeline.filter import ALL, FilterCriteria
from jobboard.pipeline.parse import DelimitedTextSource, TabularSource
from jobboard.view import DASHBOARD_VIEW, LIST_VIEW, LOAD_ERROR, JobBoardController

from conftest import HEADER


def _csv(n: int, deactivated_every: int = 0) -> str:
    lines = [",".join(HEADER)]
    for i in range(1, n + 1):
        flag = "TRUE" if deactivated_every and i % deactivated_every == 0 else "false"
        lang = "Python" if i % 2 else "Java"
        lines.append(
            f'01/{(i % 28) + 1:02d}/2025,Employer {i},Job {i},Web,{lang},"${40_000 + i * 1_000:,}",,Remote,{flag},http://x/{i}'
        )
    return "\n".join(lines)


class _Broken(TabularSource):
    def table(self) -> Table:
        raise DataSourceError("boom")


@pytest.fixture
def ctl() -> JobBoardController:
    controller = JobBoardController(LIST_VIEW, page_size=10, as_of=date(2025, 1, 31))
    assert controller.load(DelimitedTextSource(_csv(45, deactivated_every=5)))
    return controller


def test_load_keeps_only_active_jobs(ctl) -> None:
    assert len(ctl.records) == 36
    assert all(not r.is_deactivated for r in ctl.records)
    snap = ctl.snapshot()
    assert snap.stats.count == 36
    assert snap.total_pages == 4
    assert len(snap.items) == 10
    assert snap.columns == LIST_VIEW.columns


def test_deactivated_jobs_never_show_up_in_any_page(ctl) -> None:
    ctl.sort_by("Job Title")
    seen = []
    for page in range(1, ctl.snapshot().total_pages + 1):
        ctl.go_to_page(page)
        seen.extend(r.job_title for r in ctl.snapshot().items)
    assert len(seen) == 36
    assert "Job 5" not in seen and "Job 45" not in seen


def test_filter_change_resets_page(ctl) -> None:
    ctl.go_to_page(3)
    assert ctl.snapshot().current_page == 3
    assert ctl.update_criteria(search="python")
    assert ctl.state.page == 1


def test_page_change_does_not_refilter_or_resort(ctl) -> None:
    ctl.update_criteria(search="python")
    ctl.sort_by("Salary Range")
    criteria, sort = ctl.state.criteria, (ctl.state.sort_field, ctl.state.sort_direction)
    ctl.go_to_page(2)
    assert ctl.state.criteria == criteria
    assert (ctl.state.sort_field, ctl.state.sort_direction) == sort


def test_sort_header_clicks_toggle_direction_and_reset_page(ctl) -> None:
    ctl.go_to_page(3)
    ctl.sort_by("Job Title")
    assert (ctl.state.sort_field, ctl.state.sort_direction, ctl.state.page) == ("job_title", "asc", 1)

    ctl.go_to_page(2)
    ctl.snapshot()  # re-rendering alone leaves the page alone
    assert ctl.state.page == 2

    ctl.sort_by("Job Title")
    # flipping the direction also goes back to page 1
    assert (ctl.state.sort_direction, ctl.state.page) == ("desc", 1)
    ctl.sort_by("Job Title")
    assert ctl.state.sort_direction == "asc"
    ctl.sort_by("Location")
    assert (ctl.state.sort_field, ctl.state.sort_direction) == ("location", "asc")


def test_sorted_page_contents(ctl) -> None:
    ctl.sort_by("Job Title")
    ctl.sort_by("Job Title")
    assert [r.job_title for r in ctl.snapshot().items][:3] == ["Job 44", "Job 43", "Job 42"]


def test_invalid_date_range_keeps_previous_view(ctl) -> None:
    ctl.update_criteria(search="python")
    ctl.go_to_page(2)
    before = ctl.state

    ok = ctl.update_criteria(date_from=date(2025, 1, 10), date_to=date(2025, 1, 11))

    assert not ok
    assert ctl.state == before
    snap = ctl.snapshot()
    assert snap.warning == "Please select a range of at least 2 days."
    assert snap.current_page == 2

    assert ctl.update_criteria(date_from=date(2025, 1, 1), date_to=date(2025, 1, 10))
    assert ctl.snapshot().warning is None


def test_prompt_page_clamps(ctl) -> None:
    ctl.prompt_page("99")
    assert ctl.state.page == 4
    ctl.prompt_page("nope")
    assert ctl.state.page == 4
    ctl.prompt_page("-1")
    assert ctl.state.page == 1


def test_page_range_uses_viewport_width() -> None:
    narrow = JobBoardController(page_size=1, viewport_width=400)
    narrow.load(DelimitedTextSource(_csv(10)))
    narrow.go_to_page(5)
    assert narrow.snapshot().page_range == [1, "…", 5, "…", 10]


def test_chart_click_toggles_multi_select(ctl) -> None:
    assert ctl.toggle_multi_select_value("language", "Java")
    assert ctl.state.criteria.languages == ("Java",)
    assert {tuple(r.languages) for r in ctl.visible_records()} == {("Java",)}

    assert ctl.toggle_multi_select_value("language", "Java")
    assert ctl.state.criteria.languages == (ALL,)

    with pytest.raises(ValueError):
        ctl.toggle_multi_select_value("colour", "red")


def test_clear_filters_restores_all(ctl) -> None:
    ctl.apply_criteria(FilterCriteria(languages=("Java",), locations=("Remote",), salary_bucket="<50k"))
    assert ctl.snapshot().stats.count < 36
    ctl.go_to_page(2)

    assert ctl.clear_filters()
    crit = ctl.state.criteria
    assert (crit.languages, crit.locations, crit.salary_bucket) == ((ALL,), (ALL,), ALL)
    assert ctl.state.page == 1
    assert ctl.snapshot().stats.count == 36


def test_failed_load_shows_error_not_stale_data(ctl) -> None:
    assert not ctl.load(_Broken())
    snap = ctl.snapshot()
    assert snap.error == LOAD_ERROR
    assert snap.items == []
    assert snap.stats.count == 0
    assert snap.stats.salary_range == NO_DATA
    assert snap.total_pages == 1


def test_reload_replaces_previous_records(ctl) -> None:
    ctl.update_criteria(search="python")
    ctl.load(DelimitedTextSource(_csv(3)))
    assert len(ctl.records) == 3
    assert ctl.state.criteria == FilterCriteria()


def test_dashboard_view_columns_and_charts() -> None:
    dash = JobBoardController(DASHBOARD_VIEW, as_of=date(2025, 1, 31))
    dash.load(DelimitedTextSource(_csv(4)))
    dash.toggle_multi_select_value("languages", "Python")
    snap = dash.snapshot()

    assert snap.columns == ("Job Title", "Language", "Salary Range", "Location")
    assert snap.charts["languages"].as_dict() == {"Python": 2.0}
    assert snap.charts["locations"].labels == ["Remote"]
    assert snap.charts["salary"].values == [41_000, 42_000, 43_000]


def test_oversized_line_does_not_abort_the_load() -> None:
    huge = ",".join(["x" * 200_000] * len(HEADER))
    text = _csv(2) + "\n" + huge
    ctl = JobBoardController()

    assert ctl.load(DelimitedTextSource(text))
    assert len(ctl.records) == 2
    assert [d.kind for d in ctl.diagnostics if d.kind == "bad_row"] == ["bad_row"]


def test_dashboard_defaults_to_last_90_days() -> None:
    dash = JobBoardController(DASHBOARD_VIEW, as_of=date(2025, 4, 15))
    crit = dash.state.criteria
    assert (crit.date_from, crit.date_to) == (date(2025, 1, 15), date(2025, 4, 15))

    dash.load(DelimitedTextSource(_csv(4)))  # all posted 01/02 - 01/05
    assert dash.state.criteria.date_from == date(2025, 1, 15)
    assert dash.snapshot().stats.count == 0

    assert dash.update_criteria(date_from=None, date_to=None)
    assert dash.snapshot().stats.count == 4


def test_list_view_has_no_default_date_range(ctl) -> None:
    assert (ctl.state.criteria.date_from, ctl.state.criteria.date_to) == (None, None)


def test_snapshot_options_cover_all_active_jobs(ctl) -> None:
    ctl.toggle_multi_select_value("language", "Java")
    options = ctl.snapshot().options
    assert options["languages"] == [ALL, "Java", "Python"]
    assert options["locations"] == [ALL, "Remote"]
