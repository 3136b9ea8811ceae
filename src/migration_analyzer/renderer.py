"""CSV report writer with rich console summaries."""

from __future__ import annotations

import csv
import re
from pathlib import Path
from typing import Any, Sequence

from rich.console import Console
from rich.table import Table

from .models import OrgAccumulator, OrgMetrics, RepoMetric, RepoPRCount

PULL_REQUEST_HEADERS = ["Project", "Repository Name", "Number Of Pull Requests"]

REPO_METRIC_HEADERS = [
    "Repository Name",
    "Last Push Date",
    "Is Archived?",
    "Number Of Pull Requests",
    "Number of Issues",
    "Number of Projects",
    "Number of Discussions",
    "Number of Packages",
    "Number of Releases",
    "Wiki Enabled",
    "Size (KiB)",
]

ORG_METRIC_HEADERS = [
    "Number of Members",
    "Number of Projects",
    "Number of Repositories",
    "Repo with Most Pull Requests",
    "Average Pull Requests",
    "Repo with Most Issues",
    "Average Issues",
]


def sanitize_organization(organization: str) -> str:
    return re.sub(r"\s", "", organization)


def report_dir(output_dir: str | Path, organization: str, suffix: str) -> Path:
    """Return ``<output_dir>/<org>-<suffix>``, creating it if needed."""
    path = Path(output_dir) / f"{sanitize_organization(organization)}-{suffix}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _format_average(value: int | None) -> str:
    return "N/A" if value is None else str(value)


def _write_csv(path: Path, headers: list[str], rows: Sequence[Sequence[Any]]) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(headers)
        for row in rows:
            writer.writerow([_format_value(v) for v in row])


def write_pull_requests_csv(
    organization: str,
    records: Sequence[RepoPRCount],
    output_dir: str | Path = ".",
    console: Console | None = None,
) -> Path:
    path = report_dir(output_dir, organization, "Pull-Requests") / "Pull-Requests.csv"
    _write_csv(
        path,
        PULL_REQUEST_HEADERS,
        [(r.project, r.repo_name, r.num_of_pr) for r in records],
    )
    (console or Console()).print(f"[green]Exporting Completed:[/green] {path}")
    return path


def write_repo_metrics_csv(
    organization: str,
    records: Sequence[RepoMetric],
    output_dir: str | Path = ".",
    console: Console | None = None,
) -> Path:
    path = report_dir(output_dir, organization, "metrics") / "repo-metrics.csv"
    _write_csv(
        path,
        REPO_METRIC_HEADERS,
        [
            (
                r.name,
                r.pushed_at,
                r.is_archived,
                r.num_of_pull_requests,
                r.num_of_issues,
                r.num_of_projects,
                r.num_of_discussions,
                r.num_of_packages,
                r.num_of_releases,
                r.wiki_enabled,
                r.disk_usage,
            )
            for r in records
        ],
    )
    (console or Console()).print(f"[green]Exporting Completed:[/green] {path}")
    return path


def write_org_metrics_csv(
    organization: str,
    metrics: OrgMetrics,
    output_dir: str | Path = ".",
    console: Console | None = None,
) -> Path:
    path = report_dir(output_dir, organization, "metrics") / "org-metrics.csv"
    row = (
        metrics.num_of_members,
        metrics.num_of_projects,
        metrics.num_of_repos,
        metrics.most_prs,
        _format_average(metrics.average_prs),
        metrics.most_issues,
        _format_average(metrics.average_issues),
    )
    _write_csv(path, ORG_METRIC_HEADERS, [row])
    (console or Console()).print(f"[green]Exporting Completed:[/green] {path}")
    return path


def render_most_pull_requests(
    accumulator: OrgAccumulator, console: Console | None = None
) -> None:
    """Print which project/repository holds the most pull requests."""
    console = console or Console()
    if accumulator.most_pr_repo is None:
        console.print("[bold yellow]Warning:[/bold yellow] No repositories found.")
        return
    console.print(
        f"{accumulator.most_pr_repo} [Project/Repository] contains the most "
        f"Pull Requests [{accumulator.most_pr_count}]",
        markup=False,
    )


def render_org_summary(
    organization: str, metrics: OrgMetrics, console: Console | None = None
) -> None:
    console = console or Console()
    console.print(f"[bold]Summary for {organization}[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    for label, value in zip(
        ORG_METRIC_HEADERS,
        (
            metrics.num_of_members,
            metrics.num_of_projects,
            metrics.num_of_repos,
            metrics.most_prs,
            _format_average(metrics.average_prs),
            metrics.most_issues,
            _format_average(metrics.average_issues),
        ),
    ):
        summary.add_row(label, str(value))
    console.print(summary)
