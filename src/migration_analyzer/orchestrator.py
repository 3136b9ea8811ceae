"""Orchestrator: wires together clients, aggregator, and renderer."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console

from .aggregator import collect_pull_request_counts, collect_repo_metrics
from .azure.client import AzureDevOpsClient
from .github.client import GitHubClient
from .models import Credential, OrgMetrics, Repository, RunContext
from .renderer import (
    render_most_pull_requests,
    render_org_summary,
    write_org_metrics_csv,
    write_pull_requests_csv,
    write_repo_metrics_csv,
)

logger = logging.getLogger(__name__)


async def _collect_project(
    client: AzureDevOpsClient,
    project: str,
    context: RunContext,
) -> None:
    raw_repos = await client.list_repositories(project)
    repositories = [Repository.from_api(r) for r in raw_repos]
    await collect_pull_request_counts(client, repositories, context)


async def run_azure_devops(
    credential: Credential,
    output_dir: str | Path = ".",
    console: Console | None = None,
) -> RunContext:
    """Organization -> project -> repository -> pull requests, then one CSV."""
    console = console or Console()
    context = RunContext(credential=credential)

    async with AzureDevOpsClient(credential.organization, credential.token) as client:
        if credential.project:
            await _collect_project(client, credential.project, context)
        else:
            await client.authorize()
            async for project in client.iter_projects():
                console.print(
                    f"[cyan]i[/cyan] Fetching Pull Request Information for Project {project['name']}"
                )
                await _collect_project(client, project["id"], context)

    write_pull_requests_csv(
        credential.organization, context.records, output_dir=output_dir, console=console
    )
    render_most_pull_requests(context.accumulator, console=console)
    return context


async def run_github(
    credential: Credential,
    output_dir: str | Path = ".",
    console: Console | None = None,
) -> RunContext:
    """Fetch repository metrics and the organization summary, then two CSVs."""
    console = console or Console()
    context = RunContext(credential=credential)

    async with GitHubClient(
        token=credential.token,
        server=credential.server,
        allow_untrusted_ssl=credential.allow_untrusted_ssl,
    ) as client:
        await collect_repo_metrics(client, context)
        org_info = await client.fetch_org_info(credential.organization)

    accumulator = context.accumulator
    if accumulator.repo_count == 0:
        logger.warning("No repositories found for %s", credential.organization)

    metrics = OrgMetrics(
        num_of_members=org_info["membersWithRole"]["totalCount"],
        num_of_projects=org_info["projects"]["totalCount"],
        num_of_repos=accumulator.repo_count,
        most_prs=accumulator.most_pr_count,
        average_prs=accumulator.average_prs,
        most_issues=accumulator.most_issue_count,
        average_issues=accumulator.average_issues,
    )

    write_repo_metrics_csv(
        credential.organization, context.records, output_dir=output_dir, console=console
    )
    write_org_metrics_csv(
        credential.organization, metrics, output_dir=output_dir, console=console
    )
    render_org_summary(credential.organization, metrics, console=console)
    return context
