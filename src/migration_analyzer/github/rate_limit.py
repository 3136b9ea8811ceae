"""GitHub GraphQL rate limit reporting."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Tracks the ``rateLimit`` block returned with each GraphQL response.

    Limits are only reported; requests are never delayed.
    """

    def __init__(self, threshold: int = 100) -> None:
        self._limit: int | None = None
        self._remaining: int | None = None
        self._reset_at: str | None = None
        self._cost_total = 0
        self._threshold = threshold

    def update(self, payload: dict[str, Any]) -> None:
        rate_limit = (payload.get("data") or {}).get("rateLimit")
        if not rate_limit:
            return
        self._limit = rate_limit.get("limit", self._limit)
        self._remaining = rate_limit.get("remaining", self._remaining)
        self._reset_at = rate_limit.get("resetAt", self._reset_at)
        self._cost_total += rate_limit.get("cost") or 0
        if self._remaining is not None and self._remaining <= self._threshold:
            logger.warning(
                "GraphQL rate limit low: %s of %s points remaining, resets at %s",
                self._remaining,
                self._limit,
                self._reset_at,
            )
        else:
            logger.debug(
                "GraphQL rate limit: %s of %s points remaining",
                self._remaining,
                self._limit,
            )

    def report(self) -> None:
        if self._remaining is None:
            return
        logger.info(
            "GraphQL rate limit: used %d points this run, %s of %s remaining, resets at %s",
            self._cost_total,
            self._remaining,
            self._limit,
            self._reset_at,
        )
