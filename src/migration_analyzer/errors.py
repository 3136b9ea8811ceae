"""Error taxonomy shared by both platform clients and the CLI."""

from __future__ import annotations

import httpx


class MigrationAnalyzerError(Exception):
    """Base class for every fatal error raised during a run."""

    message = "Unexpected error."

    def __init__(self, detail: str | None = None, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message} {detail}")


class AuthenticationError(MigrationAnalyzerError):
    message = "Invalid token Provided."


class NotFoundError(MigrationAnalyzerError):
    message = "Invalid Organization and/or Project Provided."


class ServerError(MigrationAnalyzerError):
    message = "Server Side Error."


class UsageError(MigrationAnalyzerError):
    message = "Invalid usage."


class GraphQLError(MigrationAnalyzerError):
    message = "GraphQL request failed."


def check_response(response: httpx.Response) -> None:
    """Raise the matching error for a non-success response."""
    status = response.status_code
    if status < 400:
        return
    detail = f"{response.request.method} {response.request.url} returned {status}"
    if status in (401, 403):
        raise AuthenticationError(detail)
    if status == 404:
        raise NotFoundError(detail)
    raise ServerError(detail)
