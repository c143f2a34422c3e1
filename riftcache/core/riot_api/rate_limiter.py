"""Request pacing and backoff schedule for the Riot API client."""

import asyncio

import structlog

logger = structlog.get_logger(__name__)


class RateLimiter:
    """Global pacing guard with an exponential backoff schedule.

    Every logical request waits a fixed spacing first, regardless of the
    endpoint or of how long ago the previous request went out. Throttled
    attempts then back off by ``backoff_base * 2**attempt`` seconds.
    """

    def __init__(self, request_spacing: float = 1.5, backoff_base: float = 2.0):
        """
        Initialize rate limiter.

        Args:
            request_spacing: Seconds to sleep before every request
            backoff_base: First backoff delay after a 429, doubled per retry
        """
        self.request_spacing = request_spacing
        self.backoff_base = backoff_base

    async def wait_if_needed(self) -> None:
        """Sleep the fixed inter-request interval."""
        if self.request_spacing > 0:
            await asyncio.sleep(self.request_spacing)

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retrying after the given zero-based attempt."""
        return self.backoff_base * (2**attempt)

    async def backoff(self, attempt: int, request_name: str, max_retries: int) -> None:
        delay = self.backoff_delay(attempt)
        logger.warning(
            "Rate limit hit, backing off",
            request=request_name,
            delay=delay,
            attempt=attempt + 1,
            max_retries=max_retries,
        )
        await asyncio.sleep(delay)
