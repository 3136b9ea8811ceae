"""Data aggregation: fan out over repositories and fold results into the run state."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from rich.progress import Progress, SpinnerColumn, TextColumn

from .azure.client import AzureDevOpsClient
from .github.client import GitHubClient
from .models import RepoMetric, RepoPRCount, RepoRecord, Repository, RunContext

logger = logging.getLogger(__name__)

MAX_CONCURRENCY = 5


def fold_records(context: RunContext, records: Sequence[RepoRecord]) -> None:
    """Fold a resolved batch into the run's accumulator and record list.

    This is the only place run state is written.
    """
    for record in records:
        if isinstance(record, RepoPRCount):
            context.accumulator.add(
                f"{record.project}/{record.repo_name}", record.num_of_pr
            )
        else:
            context.accumulator.add(
                record.name, record.num_of_pull_requests, record.num_of_issues
            )
    context.records.extend(records)


def skip_disabled(repositories: Sequence[Repository]) -> list[Repository]:
    active = []
    for repo in repositories:
        if repo.is_disabled:
            logger.warning("Skipping disabled repository %s", repo.name)
            continue
        active.append(repo)
    return active


async def _collect_repo_pr_count(
    client: AzureDevOpsClient, repo: Repository
) -> RepoPRCount:
    """Fetch one repository's metadata, then count its pull requests."""
    metadata = await client.get_repository(repo.project or "", repo.id)
    href = metadata["_links"]["pullRequests"]["href"]
    num_of_pr = await client.count_pull_requests(href)
    return RepoPRCount(
        project=repo.project or "",
        repo_name=metadata.get("name", repo.name),
        num_of_pr=num_of_pr,
    )


async def collect_pull_request_counts(
    client: AzureDevOpsClient,
    repositories: Sequence[Repository],
    context: RunContext,
    max_concurrency: int = MAX_CONCURRENCY,
) -> list[RepoPRCount]:
    """Count pull requests for every enabled repository, at most
    ``max_concurrency`` at a time, and fold the batch once all have resolved.

    Any failure propagates and abandons the batch without folding it.
    """
    active = skip_disabled(repositories)
    semaphore = asyncio.Semaphore(max_concurrency)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        task = progress.add_task(
            f"Fetching pull requests for {len(active)} repos...", total=len(active)
        )

        async def collect_and_update(repo: Repository) -> RepoPRCount:
            async with semaphore:
                record = await _collect_repo_pr_count(client, repo)
            logger.debug("%s/%s: %d pull requests", record.project, record.repo_name, record.num_of_pr)
            progress.advance(task)
            return record

        tasks = [asyncio.create_task(collect_and_update(r)) for r in active]
        try:
            records = await asyncio.gather(*tasks)
        except BaseException:
            # Repositories still queued on the semaphore must not start.
            for pending in tasks:
                if not pending.done():
                    pending.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    fold_records(context, records)
    return list(records)


async def collect_repo_metrics(client: GitHubClient, context: RunContext) -> list[RepoMetric]:
    """Walk every repository page of the organization and fold each page.

    The totals arrive with the page itself, so there is no per-repository call.
    """
    org = context.credential.organization
    collected: list[RepoMetric] = []
    authorized = False

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        task = progress.add_task(f"Fetching repositories for {org}...", total=None)

        async for page in client.iter_repository_pages(org):
            if not authorized:
                logger.info("Authorized with GitHub")
                progress.update(task, total=page.get("totalCount"))
                authorized = True

            batch: list[RepoMetric] = []
            for edge in page.get("edges") or []:
                node = edge["node"]
                if node.get("isDisabled"):
                    logger.warning("Skipping disabled repository %s", node["name"])
                else:
                    batch.append(RepoMetric.from_node(node))
                progress.advance(task)

            fold_records(context, batch)
            collected.extend(batch)
            logger.debug(
                "Fetched %d of %s repositories",
                context.accumulator.repo_count,
                page.get("totalCount"),
            )

    return collected
