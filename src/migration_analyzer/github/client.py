"""GitHub GraphQL API client."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator

import httpx

from ..errors import GraphQLError, ServerError, check_response
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
PAGE_SIZE = 50

_REPOSITORIES_QUERY = """{
  rateLimit {
    limit
    cost
    remaining
    resetAt
  }
  organization(login: %(org)s) {
    repositories(first: %(first)d%(after)s) {
      totalCount
      edges {
        cursor
        node {
          projects(first: 1) {
            totalCount
          }
          hasWikiEnabled
          issues(first: 1) {
            totalCount
          }
          pullRequests(first: 1) {
            totalCount
          }
          discussions(first: 1) {
            totalCount
          }
          packages(first: 1) {
            totalCount
          }
          releases(first: 1) {
            totalCount
          }
          name
          id
          url
          pushedAt
          isPrivate
          isArchived
          isDisabled
          diskUsage
        }
      }
    }
  }
}"""

_ORG_INFO_QUERY = """{
  organization(login: %(org)s) {
    projects(first: 1) {
      totalCount
    }
    membersWithRole(first: 1) {
      totalCount
    }
  }
}"""


def repositories_query(org: str, cursor: str | None = None) -> str:
    """Build the repository page query. The cursor is passed through untouched."""
    after = f", after: {json.dumps(cursor)}" if cursor else ""
    return _REPOSITORIES_QUERY % {"org": json.dumps(org), "first": PAGE_SIZE, "after": after}


def org_info_query(org: str) -> str:
    return _ORG_INFO_QUERY % {"org": json.dumps(org)}


class GitHubClient:
    """Async GitHub GraphQL client with cursor pagination."""

    def __init__(
        self,
        token: str,
        server: str | None = None,
        allow_untrusted_ssl: bool = False,
        concurrency: int = 5,
    ) -> None:
        self._endpoint = server or GITHUB_GRAPHQL_URL
        self._client = httpx.AsyncClient(
            headers={"Authorization": f"bearer {token}"},
            timeout=None,
            verify=not allow_untrusted_ssl,
        )
        self._rate_limit = RateLimitMonitor()
        self._semaphore = asyncio.Semaphore(concurrency)

    async def close(self) -> None:
        self._rate_limit.report()
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _post(self, query: str) -> dict[str, Any]:
        async with self._semaphore:
            logger.debug("POST %s", self._endpoint)
            try:
                response = await self._client.post(self._endpoint, json={"query": query})
            except httpx.TransportError as exc:
                raise ServerError(str(exc)) from exc
        check_response(response)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ServerError(f"Invalid JSON from {self._endpoint}: {exc}") from exc
        errors = payload.get("errors")
        if errors:
            message = errors[0].get("message") or GraphQLError.message
            raise GraphQLError(message=message)
        self._rate_limit.update(payload)
        return payload

    async def fetch_repository_page(
        self, org: str, cursor: str | None = None
    ) -> dict[str, Any]:
        """Fetch one page of repositories as a ``{totalCount, edges}`` connection."""
        payload = await self._post(repositories_query(org, cursor))
        return payload["data"]["organization"]["repositories"]

    async def iter_repository_pages(self, org: str) -> AsyncIterator[dict[str, Any]]:
        """Yield repository connections until a short page is returned."""
        cursor: str | None = None
        while True:
            page = await self.fetch_repository_page(org, cursor)
            yield page
            edges = page.get("edges") or []
            if len(edges) < PAGE_SIZE:
                return
            cursor = edges[-1]["cursor"]

    async def fetch_org_info(self, org: str) -> dict[str, Any]:
        """Fetch project and member totals for an organization."""
        payload = await self._post(org_info_query(org))
        return payload["data"]["organization"]
