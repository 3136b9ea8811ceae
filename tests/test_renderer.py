"""Tests for the report writer."""

from __future__ import annotations

import csv

from rich.console import Console

from migration_analyzer.models import OrgAccumulator, OrgMetrics, RepoMetric, RepoPRCount
from migration_analyzer.renderer import (
    ORG_METRIC_HEADERS,
    PULL_REQUEST_HEADERS,
    REPO_METRIC_HEADERS,
    render_most_pull_requests,
    render_org_summary,
    report_dir,
    sanitize_organization,
    write_org_metrics_csv,
    write_pull_requests_csv,
    write_repo_metrics_csv,
)


def _console() -> Console:
    return Console(record=True, width=200)


def _read(path) -> list[list[str]]:
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def _metric(name: str = "api", **kwargs) -> RepoMetric:
    defaults = dict(
        name=name,
        pushed_at="2024-06-01T00:00:00Z",
        is_archived=False,
        num_of_pull_requests=4,
        num_of_issues=2,
        num_of_projects=1,
        num_of_discussions=0,
        num_of_packages=0,
        num_of_releases=3,
        wiki_enabled=True,
        disk_usage=2048,
    )
    defaults.update(kwargs)
    return RepoMetric(**defaults)


def _org_metrics(**kwargs) -> OrgMetrics:
    defaults = dict(
        num_of_members=12,
        num_of_projects=3,
        num_of_repos=2,
        most_prs=9,
        average_prs=6,
        most_issues=20,
        average_issues=11,
    )
    defaults.update(kwargs)
    return OrgMetrics(**defaults)


def test_sanitize_organization():
    assert sanitize_organization("My Org\tName") == "MyOrgName"
    assert sanitize_organization("plain") == "plain"


def test_report_dir_created(tmp_path):
    path = report_dir(tmp_path, "My Org", "metrics")
    assert path == tmp_path / "MyOrg-metrics"
    assert path.is_dir()


def test_report_dir_existing_is_fine(tmp_path):
    (tmp_path / "org-metrics").mkdir()
    assert report_dir(tmp_path, "org", "metrics").is_dir()


def test_write_pull_requests_csv(tmp_path):
    records = [RepoPRCount("P", "a", 3), RepoPRCount("P", "b", 7)]
    path = write_pull_requests_csv("My Org", records, output_dir=tmp_path, console=_console())

    assert path == tmp_path / "MyOrg-Pull-Requests" / "Pull-Requests.csv"
    rows = _read(path)
    assert rows[0] == PULL_REQUEST_HEADERS
    assert rows[1:] == [["P", "a", "3"], ["P", "b", "7"]]


def test_write_pull_requests_csv_twice_is_identical(tmp_path):
    records = [RepoPRCount("P", "a", 3), RepoPRCount("Q", "b, c", 7)]
    path = write_pull_requests_csv("org", records, output_dir=tmp_path, console=_console())
    first = path.read_bytes()
    write_pull_requests_csv("org", records, output_dir=tmp_path, console=_console())
    assert path.read_bytes() == first


def test_write_pull_requests_csv_empty(tmp_path):
    path = write_pull_requests_csv("org", [], output_dir=tmp_path, console=_console())
    assert _read(path) == [PULL_REQUEST_HEADERS]


def test_write_repo_metrics_csv(tmp_path):
    records = [_metric("api"), _metric("web", is_archived=True, wiki_enabled=False, disk_usage=None)]
    path = write_repo_metrics_csv("org", records, output_dir=tmp_path, console=_console())

    assert path == tmp_path / "org-metrics" / "repo-metrics.csv"
    rows = _read(path)
    assert rows[0] == REPO_METRIC_HEADERS
    assert rows[1] == ["api", "2024-06-01T00:00:00Z", "false", "4", "2", "1", "0", "0", "3", "true", "2048"]
    assert rows[2][2] == "true"
    assert rows[2][9] == "false"
    assert rows[2][10] == ""


def test_write_repo_metrics_csv_twice_is_identical(tmp_path):
    records = [_metric("api"), _metric("web")]
    path = write_repo_metrics_csv("org", records, output_dir=tmp_path, console=_console())
    first = path.read_bytes()
    write_repo_metrics_csv("org", records, output_dir=tmp_path, console=_console())
    assert path.read_bytes() == first


def test_write_org_metrics_csv(tmp_path):
    path = write_org_metrics_csv("org", _org_metrics(), output_dir=tmp_path, console=_console())

    assert path == tmp_path / "org-metrics" / "org-metrics.csv"
    assert _read(path) == [ORG_METRIC_HEADERS, ["12", "3", "2", "9", "6", "20", "11"]]


def test_write_org_metrics_csv_without_repositories(tmp_path):
    metrics = _org_metrics(num_of_repos=0, most_prs=0, average_prs=None, most_issues=0, average_issues=None)
    path = write_org_metrics_csv("org", metrics, output_dir=tmp_path, console=_console())
    assert _read(path)[1] == ["12", "3", "0", "0", "N/A", "0", "N/A"]


def test_export_message_printed(tmp_path):
    console = _console()
    path = write_pull_requests_csv("org", [], output_dir=tmp_path, console=console)
    assert f"Exporting Completed: {path}" in console.export_text()


def test_render_most_pull_requests():
    acc = OrgAccumulator()
    acc.add("P/a", 3)
    acc.add("P/b", 7)
    console = _console()
    render_most_pull_requests(acc, console=console)
    text = console.export_text()
    assert "P/b [Project/Repository] contains the most Pull Requests [7]" in text


def test_render_most_pull_requests_empty():
    console = _console()
    render_most_pull_requests(OrgAccumulator(), console=console)
    assert "No repositories found" in console.export_text()


def test_render_org_summary():
    console = _console()
    render_org_summary("org", _org_metrics(average_prs=None), console=console)
    text = console.export_text()
    assert "Summary for org" in text
    assert "Number of Members" in text
    assert "N/A" in text
