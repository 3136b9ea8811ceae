"""Shared fixtures and builders for the test suite."""

from __future__ import annotations

import httpx
import pytest


def make_response(
    status_code: int = 200,
    json_data=None,
    method: str = "GET",
    url: str = "https://dev.azure.com/org/_apis/projects",
) -> httpx.Response:
    return httpx.Response(
        status_code,
        json=json_data if json_data is not None else {},
        request=httpx.Request(method, url),
    )


def make_node(
    name: str,
    prs: int = 0,
    issues: int = 0,
    projects: int = 0,
    disabled: bool = False,
) -> dict:
    return {
        "name": name,
        "id": f"id-{name}",
        "url": f"https://github.com/org/{name}",
        "pushedAt": "2024-06-01T00:00:00Z",
        "isPrivate": False,
        "isArchived": False,
        "isDisabled": disabled,
        "diskUsage": 1024,
        "hasWikiEnabled": True,
        "projects": {"totalCount": projects},
        "issues": {"totalCount": issues},
        "pullRequests": {"totalCount": prs},
        "discussions": {"totalCount": 0},
        "packages": {"totalCount": 0},
        "releases": {"totalCount": 1},
    }


def make_graphql_page(nodes: list[dict], total: int, offset: int = 0) -> dict:
    """A full GraphQL payload holding one page of repository edges."""
    edges = [
        {"cursor": f"cursor-{offset + i}", "node": node} for i, node in enumerate(nodes)
    ]
    return {
        "data": {
            "rateLimit": {
                "limit": 5000,
                "cost": 1,
                "remaining": 4999,
                "resetAt": "2024-06-01T01:00:00Z",
            },
            "organization": {
                "repositories": {"totalCount": total, "edges": edges},
            },
        }
    }


@pytest.fixture
def graphql_pages():
    """Split ``count`` nodes into GraphQL payloads of 50."""

    def build(count: int) -> list[dict]:
        nodes = [make_node(f"repo{i}", prs=i) for i in range(count)]
        pages = []
        for start in range(0, count, 50):
            pages.append(make_graphql_page(nodes[start:start + 50], count, offset=start))
        if count % 50 == 0:
            pages.append(make_graphql_page([], count, offset=count))
        return pages

    return build
