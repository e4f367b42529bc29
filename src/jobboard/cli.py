# src/jobboard/cli.py
"""
Command-line interface for the job board.

This module provides CLI commands to:
- List active jobs with search / pathway / location filters, sorting and paging
- Show dashboard stats (salary range, language and location breakdowns)
- Print the sheet's header row to check column names
- Export the filtered job list to CSV
"""

import json
import logging
from dataclasses import replace
from datetime import date, datetime
from typing import List, Optional

import typer

from jobboard.config import Settings
from jobboard.errors import DataSourceError
from jobboard.io.sheets import open_source, read_source_file
from jobboard.models import NO_DATA
from jobboard.pipeline.filter import ALL, FilterCriteria
from jobboard.pipeline.parse import TabularSource
from jobboard.render import format_dollar, records_frame, short_location_label
from jobboard.view import DASHBOARD_VIEW, LIST_VIEW, JobBoardController, ViewConfig, ViewSnapshot

app = typer.Typer(help="Job board")

logger = logging.getLogger("jobboard")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log row diagnostics")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _settings() -> Settings:
    try:
        return Settings()
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)


def _source(source_file: Optional[str]) -> TabularSource:
    if source_file:
        return read_source_file(source_file)
    return open_source(_settings())


def _controller(
    view: ViewConfig,
    source_file: Optional[str],
    per_page: Optional[int],
    width: Optional[int],
    as_of: Optional[date] = None,
) -> JobBoardController:
    if per_page is None:
        per_page = _settings().per_page
    ctl = JobBoardController(view, page_size=per_page, viewport_width=width, as_of=as_of)
    try:
        source = _source(source_file)
    except DataSourceError as e:
        logger.error("Error loading sheet: %s", e)
        typer.echo("Error loading data", err=True)
        raise typer.Exit(code=1)
    if not ctl.load(source):
        typer.echo(ctl.error, err=True)
        raise typer.Exit(code=1)
    return ctl


def _date(value: Optional[datetime]):
    return value.date() if value else None


def _apply(ctl: JobBoardController, criteria: FilterCriteria, sort: Optional[str], desc: bool, page: int) -> None:
    if not ctl.apply_criteria(criteria):
        typer.echo(ctl.warning, err=True)
        raise typer.Exit(code=2)
    if sort:
        try:
            ctl.sort_by(sort)
            if desc:
                ctl.sort_by(sort)  # second click flips to descending
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--sort")
    ctl.go_to_page(page)


def _echo_page(snap: ViewSnapshot) -> None:
    if not snap.items:
        typer.echo("No jobs match the selected filters.")
        return
    typer.echo(records_frame(snap.items, snap.columns).to_string(index=False))
    pages = " ".join(str(p) if p != snap.current_page else f"[{p}]" for p in snap.page_range)
    typer.echo(f"\nPage {snap.current_page} of {snap.total_pages}: {pages}")


def _pay_range(snap: ViewSnapshot) -> str:
    sal = snap.stats.salary_range
    if sal == NO_DATA:
        return "No salary data"
    return f"{format_dollar(sal.min)} - {format_dollar(sal.max)}"


@app.command()
def jobs(
    search: str = typer.Option("", "--search", "-s", help="Employer, title or language contains"),
    pathway: str = typer.Option("", "--pathway", help="Exact pathway"),
    location: str = typer.Option("", "--location", help="Exact location"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Column to sort by, e.g. 'Job Title'"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    page: int = typer.Option(1, "--page", "-p"),
    per_page: Optional[int] = typer.Option(None, "--per-page", min=1),
    width: Optional[int] = typer.Option(None, "--width", help="Viewport width for the page index"),
    source_file: Optional[str] = typer.Option(None, "--source-file", help="Local .csv or .json snapshot"),
):
    """
    Active job list: count, pay range and one page of the table.
    """
    ctl = _controller(LIST_VIEW, source_file, per_page, width)
    criteria = FilterCriteria(search=search, pathway=pathway, location=location)
    _apply(ctl, criteria, sort, desc, page)
    snap = ctl.snapshot()

    typer.echo(f"Jobs: {snap.stats.count}    Pay range: {_pay_range(snap)}")
    _echo_page(snap)


@app.command()
def dashboard(
    language: Optional[List[str]] = typer.Option(None, "--language", help="Repeatable; default All"),
    location: Optional[List[str]] = typer.Option(None, "--location", help="Repeatable; default All"),
    salary: str = typer.Option(ALL, "--salary", help="All, <50k, 50-75k, 75-100k or >100k"),
    date_from: Optional[datetime] = typer.Option(None, "--from", formats=["%Y-%m-%d"]),
    date_to: Optional[datetime] = typer.Option(None, "--to", formats=["%Y-%m-%d"]),
    all_dates: bool = typer.Option(False, "--all-dates", help="Drop the default last-90-days range"),
    as_of: Optional[datetime] = typer.Option(None, "--as-of", formats=["%Y-%m-%d"], help="Treat this day as today"),
    sort: Optional[str] = typer.Option(None, "--sort"),
    desc: bool = typer.Option(False, "--desc"),
    page: int = typer.Option(1, "--page", "-p"),
    per_page: Optional[int] = typer.Option(None, "--per-page", min=1),
    as_json: bool = typer.Option(False, "--json", help="Print stats and chart series as JSON"),
    source_file: Optional[str] = typer.Option(None, "--source-file"),
):
    """
    Dashboard: stats and chart series for the selected languages, locations,
    salary band and date range, plus the trimmed job table.
    """
    ctl = _controller(DASHBOARD_VIEW, source_file, per_page, None, _date(as_of))
    start, end = _date(date_from), _date(date_to)
    if all_dates:
        start = end = None
    elif start is None and end is None:
        # view default: the last 90 days
        start, end = ctl.state.criteria.date_from, ctl.state.criteria.date_to
    criteria = replace(
        ctl.state.criteria,
        languages=tuple(language or (ALL,)),
        locations=tuple(location or (ALL,)),
        salary_bucket=salary,
        date_from=start,
        date_to=end,
    )
    _apply(ctl, criteria, sort, desc, page)
    snap = ctl.snapshot()

    if as_json:
        typer.echo(json.dumps({
            "count": snap.stats.count,
            "recent_count": snap.stats.recent_count,
            "pay_range": _pay_range(snap),
            "languages": snap.stats.language_frequency,
            "locations": snap.stats.location_frequency,
            "charts": {name: series.as_dict() for name, series in snap.charts.items()},
            "options": snap.options,
        }, indent=2))
        return

    typer.echo(f"Number of jobs: {snap.stats.count} ({snap.stats.recent_count} in the last 30 days)")
    typer.echo(f"Pay range: {_pay_range(snap)}")
    langs = ", ".join(f"{k} {v}" for k, v in snap.charts["languages"].as_dict().items())
    typer.echo(f"Languages: {langs or '-'}")
    shares = ", ".join(
        f"{short_location_label(k)} {v:.1f}%" for k, v in snap.charts["locations"].as_dict().items()
    )
    typer.echo(f"Salary share by location: {shares or '-'}")
    typer.echo("")
    _echo_page(snap)


@app.command()
def headers(source_file: Optional[str] = typer.Option(None, "--source-file")):
    """
    Debug: show the sheet's header row and any rows that were skipped.
    """
    try:
        table = _source(source_file).table()
    except DataSourceError as e:
        typer.echo(f"Error loading data: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(table.header))
    for diag in table.diagnostics:
        typer.echo(diag.message, err=True)


@app.command()
def export(
    out: str = typer.Argument(..., help="CSV file to write"),
    search: str = typer.Option("", "--search", "-s"),
    pathway: str = typer.Option("", "--pathway"),
    location: str = typer.Option("", "--location"),
    sort: Optional[str] = typer.Option(None, "--sort"),
    desc: bool = typer.Option(False, "--desc"),
    source_file: Optional[str] = typer.Option(None, "--source-file"),
):
    """
    Write every filtered active job (not just one page) to a CSV file.
    """
    ctl = _controller(LIST_VIEW, source_file, None, None)
    _apply(ctl, FilterCriteria(search=search, pathway=pathway, location=location), sort, desc, 1)
    rows = ctl.visible_records()
    records_frame(rows, LIST_VIEW.columns).to_csv(out, index=False)
    typer.echo(json.dumps({"exported": len(rows), "path": out}))


if __name__ == "__main__":
    app()
