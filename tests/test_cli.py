from __future__ import annotations

import json

import pandas as pd
import pytest
from typer.testing import CliRunner

from jobboard.cli import app

from conftest import ACME_ROW, HEADER

runner = CliRunner()


@pytest.fixture
def source(tmp_path, sheet_csv) -> str:
    path = tmp_path / "jobs.csv"
    path.write_text(sheet_csv, encoding="utf-8")
    return str(path)


@pytest.fixture
def clean_source(tmp_path, sheet_csv) -> str:
    # no malformed rows, so nothing but command output is printed
    path = tmp_path / "clean.csv"
    path.write_text("\n".join(sheet_csv.splitlines()[:-1]), encoding="utf-8")
    return str(path)


def test_jobs_lists_active_jobs(source) -> None:
    result = runner.invoke(app, ["jobs", "--source-file", source])

    assert result.exit_code == 0, result.output
    assert "Jobs: 3" in result.output
    assert "Pay range: $45,000 - $80,000" in result.output
    assert "Acme" in result.output and "Globex" in result.output
    assert "Initech" not in result.output  # deactivated
    assert "Page 1 of 1" in result.output


def test_jobs_search_and_sort(source) -> None:
    result = runner.invoke(app, ["jobs", "--source-file", source, "--search", "python", "--sort", "Employer", "--desc"])

    assert result.exit_code == 0, result.output
    assert "Jobs: 2" in result.output
    assert result.output.index("Globex") < result.output.index("Acme")


def test_jobs_bad_sort_column(source) -> None:
    result = runner.invoke(app, ["jobs", "--source-file", source, "--sort", "Favourite Colour"])
    assert result.exit_code != 0


def test_dashboard_json(clean_source) -> None:
    result = runner.invoke(
        app, ["dashboard", "--source-file", clean_source, "--as-of", "2025-03-31", "--language", "Python", "--json"]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["count"] == 2
    assert data["charts"]["languages"] == {"Python": 2.0}
    assert data["pay_range"] == "$45,000 - $80,000"
    assert data["options"]["languages"] == ["All", "C#", "JS", "Python", "SQL"]
    assert data["options"]["locations"] == ["All", "Louisville", "Remote"]


def test_dashboard_text(source) -> None:
    result = runner.invoke(app, ["dashboard", "--source-file", source, "--as-of", "2025-03-31"])

    assert result.exit_code == 0, result.output
    assert "Number of jobs: 3" in result.output
    assert "Salary share by location: Remote 60.9%, Louisville 39.1%" in result.output
    assert "Contact Person" not in result.output  # dashboard table is trimmed


def test_dashboard_rejects_short_date_range(source) -> None:
    result = runner.invoke(app, ["dashboard", "--source-file", source, "--from", "2025-01-01", "--to", "2025-01-02"])
    assert result.exit_code == 2
    assert "at least 2 days" in result.output


def test_dashboard_no_matches(source) -> None:
    result = runner.invoke(app, ["dashboard", "--source-file", source, "--as-of", "2025-03-31", "--salary", ">100k"])
    assert result.exit_code == 0, result.output
    assert "No salary data" in result.output
    assert "No jobs match the selected filters." in result.output


def test_headers(clean_source) -> None:
    result = runner.invoke(app, ["headers", "--source-file", clean_source])
    assert result.exit_code == 0
    assert json.loads(result.output.splitlines()[0])[0] == "Date"


def test_export_writes_all_filtered_rows(source, tmp_path) -> None:
    out = tmp_path / "out.csv"
    result = runner.invoke(app, ["export", str(out), "--source-file", source])

    assert result.exit_code == 0, result.output
    df = pd.read_csv(out, keep_default_na=False)
    assert list(df["Employer"]) == ["Acme", "Globex", "Umbrella"]
    assert list(df["Salary Range"]) == ["$60,000 - $80,000", "$45,000", "Not Provided"]
    assert list(df["Apply"]) == ["http://x", "https://globex.example/apply", "email hr@umbrella.example"]


def test_missing_source_file_exits_with_error(tmp_path) -> None:
    result = runner.invoke(app, ["jobs", "--source-file", str(tmp_path / "nope.csv")])
    assert result.exit_code == 1
    assert "Error loading data" in result.output


def test_dashboard_defaults_to_last_90_days(source) -> None:
    result = runner.invoke(app, ["dashboard", "--source-file", source, "--as-of", "2025-06-30"])
    assert result.exit_code == 0, result.output
    assert "Number of jobs: 0" in result.output

    result = runner.invoke(app, ["dashboard", "--source-file", source, "--as-of", "2025-06-30", "--all-dates"])
    assert result.exit_code == 0, result.output
    assert "Number of jobs: 3" in result.output


def test_per_page_must_be_positive(source) -> None:
    result = runner.invoke(app, ["jobs", "--source-file", source, "--per-page", "0"])
    assert result.exit_code == 2


def test_bad_per_page_setting_is_reported(source, monkeypatch) -> None:
    monkeypatch.setenv("JOBBOARD_PER_PAGE", "ten")
    result = runner.invoke(app, ["jobs", "--source-file", source])
    assert result.exit_code == 2
    assert "JOBBOARD_PER_PAGE" in result.output


def test_headers_from_bare_json_snapshot(tmp_path) -> None:
    path = tmp_path / "snap.json"
    path.write_text(json.dumps([HEADER, ACME_ROW]), encoding="utf-8")
    result = runner.invoke(app, ["headers", "--source-file", str(path)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output.splitlines()[0]) == HEADER
