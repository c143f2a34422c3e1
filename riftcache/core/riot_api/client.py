"""Riot API HTTP client with request pacing, bounded 429 backoff and error mapping."""

import asyncio
from typing import Any, List, Optional, Type, TypeVar, Union

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from riftcache.core.config import get_global_settings
from .constants import Platform, parse_platform
from .endpoints import RiotAPIEndpoints
from .errors import (
    RateLimitError,
    ResponseDecodeError,
    RiotAPIError,
    TransportError,
    error_for_status,
)
from .models import AccountDTO, LeagueEntryDTO, MatchDTO, SummonerDTO
from .rate_limiter import RateLimiter

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

class RiotAPIClient:
    """Riot API client: pure request/response calls with no caching knowledge."""

    def __init__(
        self,
        api_key: str,
        platform: Union[str, Platform, None] = None,
        request_spacing: Optional[float] = None,
        backoff_base: Optional[float] = None,
        max_retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Riot API client.

        Args:
            api_key: Riot API key sent as the X-Riot-Token header
            platform: Platform region code (e.g. "euw1"); the regional
                cluster is derived from it
            request_spacing: Seconds slept before every request
            backoff_base: First 429 backoff delay in seconds
            max_retries: Retries allowed after a 429 before giving up
            transport: Optional httpx transport (used by tests)
        """
        settings = get_global_settings()
        self.api_key = api_key
        self.platform = parse_platform(platform or settings.riot_region)
        self.max_retries = (
            settings.max_rate_limit_retries if max_retries is None else max_retries
        )

        # Initialize components
        self.rate_limiter = RateLimiter(
            request_spacing=(
                settings.request_spacing_seconds
                if request_spacing is None
                else request_spacing
            ),
            backoff_base=(
                settings.backoff_base_seconds if backoff_base is None else backoff_base
            ),
        )
        self.endpoints = RiotAPIEndpoints(self.platform)
        self.timeout = httpx.Timeout(
            connect=settings.http_connect_timeout,
            read=settings.http_read_timeout,
            write=settings.http_write_timeout,
            pool=settings.http_pool_timeout,
        )
        self._transport = transport

        # HTTP session
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    @property
    def region(self):
        return self.endpoints.region

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    headers = {
                        "X-Riot-Token": self.api_key,
                        "Accept": "application/json",
                        "User-Agent": "riftcache/1.0",
                    }
                    self.session = httpx.AsyncClient(
                        headers=headers,
                        timeout=self.timeout,
                        transport=self._transport,
                    )

                    logger.debug(
                        "Riot API client session started",
                        region=self.region.value,
                        platform=self.platform.value,
                        api_key_prefix="[REDACTED]" if self.api_key else "None",
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()
            logger.debug("Riot API client session closed")

    @staticmethod
    def _decode_json(response: httpx.Response, request_name: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                f"{request_name} response: {e}",
                status_code=response.status_code,
                response_body=response.text[:500],
            ) from e

    async def _make_request(self, url: str, request_name: str) -> Any:
        """
        Make a GET request with pacing and 429 retry logic.

        Args:
            url: Request URL
            request_name: Operation name for logs and error messages

        Returns:
            Decoded JSON body

        Raises:
            RateLimitError: 429 persisted past the retry budget
            TransportError: No response was received
            ResponseDecodeError: Body is not valid JSON
            RiotAPIError: Any other non-2xx status (never retried)
        """
        await self.start_session()

        if self.session is None:
            raise RiotAPIError("Session not initialized")

        await self.rate_limiter.wait_if_needed()

        for attempt in range(self.max_retries + 1):
            logger.debug(
                "Making request",
                request=request_name,
                attempt=attempt + 1,
                max_attempts=self.max_retries + 1,
            )
            try:
                response = await self.session.get(url)
            except httpx.RequestError as e:
                logger.warning(
                    "Riot API transport failure",
                    request=request_name,
                    error=str(e),
                )
                raise TransportError(
                    f"{request_name}: {e or e.__class__.__name__}"
                ) from e

            status = response.status_code
            if 200 <= status < 300:
                return self._decode_json(response, request_name)

            body = response.text
            if status == 429:
                if attempt < self.max_retries:
                    await self.rate_limiter.backoff(
                        attempt, request_name, self.max_retries
                    )
                    continue
                retry_after = response.headers.get("Retry-After")
                raise RateLimitError(
                    "Rate limit exceeded",
                    status_code=status,
                    response_body=body,
                    retry_after=float(retry_after) if retry_after else None,
                )

            raise error_for_status(status, body)

        raise RiotAPIError(f"Max retries exceeded for {request_name}")

    @staticmethod
    def _parse(model: Type[ModelT], data: Any, what: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ResponseDecodeError(f"{what}: {e}") from e

    # Account endpoints
    async def get_account_by_riot_id(self, game_name: str, tag_line: str) -> AccountDTO:
        """Get account by Riot ID (gameName#tagLine)."""
        url = self.endpoints.account_by_riot_id(game_name, tag_line)
        data = await self._make_request(url, "get_account_by_riot_id")
        account = self._parse(AccountDTO, data, "account data")

        logger.info(
            "Retrieved account",
            riot_id=f"{game_name}#{tag_line}",
            puuid=account.puuid,
        )
        return account

    # Match endpoints
    async def get_match_ids(
        self, puuid: str, start: int = 0, count: int = 20
    ) -> List[str]:
        """Get a page of match ids for a player, newest first."""
        url = self.endpoints.match_ids_by_puuid(puuid, start, count)
        data = await self._make_request(url, "get_match_ids")

        if not isinstance(data, list) or not all(isinstance(m, str) for m in data):
            raise ResponseDecodeError("match IDs: expected a list of strings")

        logger.info("Retrieved match IDs", puuid=puuid, count=len(data))
        return data

    async def get_match(self, match_id: str) -> MatchDTO:
        """Get match details by match ID."""
        url = self.endpoints.match_by_id(match_id)
        data = await self._make_request(url, "get_match_details")
        return self._parse(MatchDTO, data, "match details")

    async def get_matches_batch(
        self, match_ids: List[str]
    ) -> List[Union[MatchDTO, RiotAPIError]]:
        """Fetch several matches one after another.

        Each slot holds either the match or the error for that id; one
        failure does not stop the batch. Pacing applies per request.
        """
        results: List[Union[MatchDTO, RiotAPIError]] = []
        for match_id in match_ids:
            try:
                results.append(await self.get_match(match_id))
            except RiotAPIError as e:
                logger.warning("Batch match fetch failed", match_id=match_id, error=str(e))
                results.append(e)
        return results

    # Summoner endpoints
    async def get_summoner_by_puuid(self, puuid: str) -> SummonerDTO:
        """Get summoner by PUUID."""
        url = self.endpoints.summoner_by_puuid(puuid)
        data = await self._make_request(url, "get_summoner_by_puuid")
        summoner = self._parse(SummonerDTO, data, "summoner data")

        logger.info(
            "Summoner data fetched",
            puuid=summoner.puuid,
            summoner_id=summoner.id,
            level=summoner.summoner_level,
        )
        return summoner

    # League endpoints
    async def get_league_entries(self, summoner_id: str) -> List[LeagueEntryDTO]:
        """Get ranked league entries by encrypted summoner ID."""
        url = self.endpoints.league_entries_by_summoner(summoner_id)
        data = await self._make_request(url, "get_ranked_stats")

        if not isinstance(data, list):
            raise ResponseDecodeError(
                f"ranked stats: expected list response, got {type(data).__name__}"
            )

        return [self._parse(LeagueEntryDTO, entry, "ranked stats") for entry in data]
