"""Data models for migration-analyzer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Credential:
    """Everything a run needs to talk to the source platform."""

    organization: str
    token: str = field(repr=False)
    project: str | None = None
    server: str | None = None
    allow_untrusted_ssl: bool = False


@dataclass
class Project:
    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Project:
        return cls(id=data["id"], name=data["name"])


@dataclass
class Repository:
    id: str
    name: str
    project: str | None = None
    is_disabled: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Repository:
        """Build from an Azure DevOps repository object."""
        project = data.get("project") or {}
        return cls(
            id=data["id"],
            name=data["name"],
            project=project.get("name"),
            is_disabled=bool(data.get("isDisabled", False)),
        )


@dataclass(frozen=True)
class RepoMetric:
    name: str
    pushed_at: str | None
    is_archived: bool
    num_of_pull_requests: int
    num_of_issues: int
    num_of_projects: int
    num_of_discussions: int
    num_of_packages: int
    num_of_releases: int
    wiki_enabled: bool
    disk_usage: int | None

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> RepoMetric:
        """Build from a GitHub GraphQL repository node."""
        return cls(
            name=node["name"],
            pushed_at=node.get("pushedAt"),
            is_archived=bool(node.get("isArchived", False)),
            num_of_pull_requests=node["pullRequests"]["totalCount"],
            num_of_issues=node["issues"]["totalCount"],
            num_of_projects=node["projects"]["totalCount"],
            num_of_discussions=node["discussions"]["totalCount"],
            num_of_packages=node["packages"]["totalCount"],
            num_of_releases=node["releases"]["totalCount"],
            wiki_enabled=bool(node.get("hasWikiEnabled", False)),
            disk_usage=node.get("diskUsage"),
        )


@dataclass(frozen=True)
class RepoPRCount:
    project: str
    repo_name: str
    num_of_pr: int


RepoRecord = RepoMetric | RepoPRCount


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


@dataclass
class OrgAccumulator:
    """Running maxima and totals over every repository folded so far."""

    most_pr_count: int = 0
    most_pr_repo: str | None = None
    most_issue_count: int = 0
    most_issue_repo: str | None = None
    pr_total: int = 0
    issue_total: int = 0
    repo_count: int = 0

    def add(self, repo: str, pull_requests: int, issues: int = 0) -> None:
        # Ties go to the later repository.
        if self.most_pr_repo is None or pull_requests >= self.most_pr_count:
            self.most_pr_count = pull_requests
            self.most_pr_repo = repo
        if self.most_issue_repo is None or issues >= self.most_issue_count:
            self.most_issue_count = issues
            self.most_issue_repo = repo
        self.pr_total += pull_requests
        self.issue_total += issues
        self.repo_count += 1

    @property
    def average_prs(self) -> int | None:
        if self.repo_count == 0:
            return None
        return round_half_up(self.pr_total / self.repo_count)

    @property
    def average_issues(self) -> int | None:
        if self.repo_count == 0:
            return None
        return round_half_up(self.issue_total / self.repo_count)


@dataclass
class OrgMetrics:
    num_of_members: int
    num_of_projects: int
    num_of_repos: int
    most_prs: int
    average_prs: int | None
    most_issues: int
    average_issues: int | None


@dataclass
class RunContext:
    """State for a single organization run.

    Only the aggregator's fold step writes ``accumulator`` and ``records``.
    """

    credential: Credential
    accumulator: OrgAccumulator = field(default_factory=OrgAccumulator)
    records: list[RepoRecord] = field(default_factory=list)
