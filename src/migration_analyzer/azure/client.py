"""Azure DevOps REST API client."""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, AsyncIterator

import httpx

from ..errors import ServerError, check_response

logger = logging.getLogger(__name__)

AZURE_DEVOPS_URL = "https://dev.azure.com"
API_VERSION = "6.0"
PAGE_SIZE = 100


def basic_auth_header(token: str) -> str:
    # Older tooling encoded the literal "Basic :" prefix; the service accepts it.
    encoded = base64.b64encode(f"Basic :{token}".encode()).decode()
    return f"Basic {encoded}"


class AzureDevOpsClient:
    """Async Azure DevOps REST client with $skip/$top pagination."""

    def __init__(self, organization: str, token: str, concurrency: int = 5) -> None:
        self._organization = organization
        self._client = httpx.AsyncClient(
            base_url=f"{AZURE_DEVOPS_URL}/{organization}/",
            headers={"Authorization": basic_auth_header(token)},
            timeout=None,
        )
        self._semaphore = asyncio.Semaphore(concurrency)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AzureDevOpsClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get(self, url: str) -> Any:
        async with self._semaphore:
            logger.debug("GET %s", url)
            try:
                response = await self._client.get(url)
            except httpx.TransportError as exc:
                raise ServerError(str(exc)) from exc
        check_response(response)
        try:
            return response.json()
        except ValueError as exc:
            raise ServerError(f"Invalid JSON from {url}: {exc}") from exc

    async def _iter_pages(self, url: str, criteria: str = "") -> AsyncIterator[dict[str, Any]]:
        """Yield pages until one holds fewer than PAGE_SIZE items.

        A collection that is an exact multiple of PAGE_SIZE ends with an
        empty page.
        """
        skip = 0
        while True:
            page = await self._get(
                f"{url}?$skip={skip}&$top={PAGE_SIZE}{criteria}&api-version={API_VERSION}"
            )
            yield page
            if page.get("count", 0) < PAGE_SIZE:
                return
            skip += PAGE_SIZE

    async def authorize(self) -> None:
        """Check the token can read the organization's projects."""
        await self._get(f"_apis/projects?api-version={API_VERSION}")

    async def iter_projects(self) -> AsyncIterator[dict[str, Any]]:
        """Yield every project in the organization in server order."""
        async for page in self._iter_pages("_apis/projects"):
            for project in page.get("value", []):
                yield project

    async def list_projects(self) -> list[dict[str, Any]]:
        return [project async for project in self.iter_projects()]

    async def list_repositories(self, project: str) -> list[dict[str, Any]]:
        """List the repositories in a project (by name or id)."""
        data = await self._get(
            f"{project}/_apis/git/repositories?api-version={API_VERSION}"
        )
        return data.get("value", [])

    async def get_repository(self, project: str, repo_id: str) -> dict[str, Any]:
        return await self._get(
            f"{project}/_apis/git/repositories/{repo_id}?api-version={API_VERSION}"
        )

    async def count_pull_requests(self, href: str) -> int:
        """Count every pull request (any status) behind a repository's link."""
        total = 0
        async for page in self._iter_pages(href, "&searchCriteria.status=all"):
            total += page.get("count", 0)
        return total
