"""
Read-through cache orchestration.

``CacheOrchestrator`` decides per request whether to answer from the store
or to fetch from the Riot API and populate the store. Persisting a fetched
result is best-effort: a store failure after a successful fetch is logged
and the fetched data is still returned.
"""

from typing import Any, Callable, Dict, List, Optional

import structlog

from riftcache.core.config import ClientConfig, RuntimeConfig
from riftcache.core.exceptions import (
    CachedPayloadError,
    CacheServiceError,
    NotConfiguredError,
    PersistenceError,
)
from riftcache.core.riot_api import MatchDTO, RiotAPIClient, RiotAPIError, SummonerDTO
from riftcache.features.matches.schemas import MatchRecord
from riftcache.features.matches.transformers import (
    flatten_participants,
    match_to_record,
)
from riftcache.features.player_stats import PlayerStatsAggregator, PlayerStatsSummary
from riftcache.features.players.schemas import PlayerIdentity
from riftcache.features.ranks.schemas import RankedSnapshot, select_league_entry
from riftcache.store import CacheStore

logger = structlog.get_logger(__name__)

ClientFactory = Callable[[ClientConfig], RiotAPIClient]

NOT_CONFIGURED_MESSAGE = "Riot API client not initialized. Please set your API key first."


def default_client_factory(config: ClientConfig) -> RiotAPIClient:
    """Build a client for the configured key and platform region."""
    return RiotAPIClient(api_key=config.api_key or "", platform=config.region)


class CacheOrchestrator:
    """Cache-first access to matches, ranked standings, identities and stats."""

    def __init__(
        self,
        store: CacheStore,
        runtime_config: RuntimeConfig,
        client_factory: ClientFactory = default_client_factory,
        aggregator: Optional[PlayerStatsAggregator] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Persistent cache store
            runtime_config: Shared API key and region cell, read on every call
            client_factory: Builds a RiotAPIClient from a config snapshot
            aggregator: Stats aggregator; defaults to a 100-game sample
        """
        self.store = store
        self.runtime_config = runtime_config
        self.client_factory = client_factory
        self.aggregator = aggregator or PlayerStatsAggregator()

    async def _require_config(self) -> ClientConfig:
        config = await self.runtime_config.snapshot()
        if not config.is_configured:
            raise NotConfiguredError(NOT_CONFIGURED_MESSAGE)
        return config

    async def _client(self) -> RiotAPIClient:
        return self.client_factory(await self._require_config())

    # Matches

    async def get_match_details(self, match_id: str) -> Dict[str, Any]:
        """
        Get the full match payload, from cache when present.

        Raises:
            CachedPayloadError: The cached blob no longer decodes
            NotConfiguredError: Cache miss with no API key set
            RiotAPIError: The fetch failed
        """
        try:
            record = await self.store.get_match(match_id)
        except PersistenceError as e:
            logger.warning(
                "Cache lookup failed, treating as miss", match_id=match_id, error=str(e)
            )
            record = None

        if record is not None:
            logger.info("Cache hit", match_id=match_id)
            return self._decode(record)

        logger.info("Cache miss", match_id=match_id)
        async with await self._client() as client:
            match = await client.get_match(match_id)

        await self._persist_match(match)
        return match.to_payload()

    @staticmethod
    def _decode(record: MatchRecord) -> Dict[str, Any]:
        try:
            return record.payload()
        except ValueError as e:
            raise CachedPayloadError(
                f"Failed to parse cached match {record.match_id}: {e}",
                operation="get_match_details",
                original_error=e,
            ) from e

    async def _persist_match(self, match: MatchDTO) -> bool:
        """Store a fetched match and its participant rows.

        Participant rows are written when the match row is new or when an
        earlier write left the match without any. Returns True when
        something was written, False when the match was already complete or
        the store rejected the write.
        """
        now = self.store.clock()
        try:
            inserted = await self.store.insert_match(match_to_record(match, now))
            if not inserted and await self.store.match_has_participants(match.match_id):
                return False
            await self.store.add_participant_stats(flatten_participants(match, now))
        except PersistenceError as e:
            logger.warning(
                "Failed to cache match, returning fetched data",
                match_id=match.match_id,
                error=str(e),
            )
            return False

        if not inserted:
            logger.info("Regenerated participant rows", match_id=match.match_id)
        return True

    async def _is_complete(self, match_id: str) -> bool:
        """True when the match and its participant rows are both cached."""
        if not await self.store.match_exists(match_id):
            return False
        return await self.store.match_has_participants(match_id)

    async def get_cached_matches(self, puuid: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Cached payloads for a player, newest first; malformed rows are skipped."""
        records = await self.store.get_matches_for_player(puuid, limit)
        payloads = []
        for record in records:
            try:
                payloads.append(record.payload())
            except ValueError as e:
                logger.warning(
                    "Skipping malformed cached match",
                    match_id=record.match_id,
                    error=str(e),
                )
        return payloads

    async def get_recent_matches(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Most recent cached match records across all players."""
        records = await self.store.get_recent_matches(limit)
        return [record.model_dump() for record in records]

    async def fetch_match_ids(
        self, puuid: str, start: int = 0, count: int = 20
    ) -> List[str]:
        async with await self._client() as client:
            return await client.get_match_ids(puuid, start=start, count=count)

    async def sync_match_history(self, puuid: str, count: int = 20) -> Dict[str, Any]:
        """
        Bring a player's cached history up to date.

        Lists the newest ``count`` match ids and fetches the ones not yet
        cached, stopping at the id recorded by the previous sync. A match
        stored without participant rows counts as not cached. A failed
        fetch is skipped; the sync marker then stays put so the next sync
        retries it.

        Returns:
            Summary with the number of new, already-cached and failed matches
        """
        metadata = await self.store.get_sync_metadata(puuid)
        last_synced = metadata.last_match_id if metadata else None

        fetched = 0
        already_cached = 0
        failed = 0
        async with await self._client() as client:
            match_ids = await client.get_match_ids(puuid, start=0, count=count)

            missing = []
            for match_id in match_ids:
                if match_id == last_synced:
                    break
                if await self._is_complete(match_id):
                    already_cached += 1
                    continue
                missing.append(match_id)

            results = await client.get_matches_batch(missing) if missing else []
            for result in results:
                if isinstance(result, RiotAPIError):
                    failed += 1
                elif await self._persist_match(result):
                    fetched += 1
                else:
                    failed += 1

        if failed or not match_ids:
            newest = last_synced
        else:
            newest = match_ids[0]
        total_cached = await self.store.count_matches_for_player(puuid)
        try:
            await self.store.upsert_sync_metadata(puuid, newest, total_cached)
        except PersistenceError as e:
            logger.warning("Failed to record sync metadata", puuid=puuid, error=str(e))

        logger.info(
            "Match history synced",
            puuid=puuid,
            fetched=fetched,
            already_cached=already_cached,
            failed=failed,
            total_cached=total_cached,
        )
        return {
            "puuid": puuid,
            "fetched": fetched,
            "already_cached": already_cached,
            "failed": failed,
            "total_cached": total_cached,
            "last_match_id": newest,
        }

    # Ranked

    async def get_ranked_stats(
        self, puuid: str, summoner_id: Optional[str] = None
    ) -> RankedSnapshot:
        """
        Get the ranked snapshot, refreshing it once it is older than the TTL.

        The summoner id comes from the argument, then the stored identity,
        then the summoner endpoint.
        """
        cached = await self.store.get_ranked_snapshot(puuid)
        if cached is not None:
            logger.debug("Ranked cache hit", puuid=puuid)
            return cached

        logger.info("Ranked cache miss", puuid=puuid)
        async with await self._client() as client:
            if not summoner_id:
                identity = await self.store.get_identity(puuid)
                summoner_id = identity.summoner_id if identity else None
            if not summoner_id:
                summoner_id = (await client.get_summoner_by_puuid(puuid)).id
            if not summoner_id:
                raise CacheServiceError(
                    "Failed to fetch ranked stats: no summoner id for player",
                    operation="get_ranked_stats",
                    context={"puuid": puuid},
                )
            entries = await client.get_league_entries(summoner_id)

        snapshot = RankedSnapshot.from_league_entry(puuid, select_league_entry(entries))
        try:
            snapshot = await self.store.upsert_ranked_snapshot(snapshot)
        except PersistenceError as e:
            logger.warning("Failed to cache ranked snapshot", puuid=puuid, error=str(e))
        return snapshot

    # Players

    async def get_player_stats(self, puuid: str) -> PlayerStatsSummary:
        rows = await self.store.get_participant_stats(puuid, self.aggregator.sample_size)
        return self.aggregator.calculate(rows)

    async def resolve_player(
        self, game_name: str, tag_line: str, refresh: bool = False
    ) -> PlayerIdentity:
        """
        Resolve a Riot ID to a stored identity, looking it up upstream on a
        miss or when ``refresh`` is set.
        """
        if not refresh:
            cached = await self.store.find_identity_by_riot_id(game_name, tag_line)
            if cached is not None:
                return cached

        async with await self._client() as client:
            account = await client.get_account_by_riot_id(game_name, tag_line)
            summoner = await client.get_summoner_by_puuid(account.puuid)

        identity = PlayerIdentity(
            puuid=account.puuid,
            game_name=account.game_name,
            tag_line=account.tag_line,
            summoner_id=summoner.id,
            account_id=summoner.account_id,
            summoner_level=summoner.summoner_level,
            profile_icon_id=summoner.profile_icon_id,
        )
        try:
            identity = await self.store.upsert_identity(identity)
        except PersistenceError as e:
            logger.warning("Failed to cache identity", puuid=identity.puuid, error=str(e))
        return identity

    async def get_summoner(self, puuid: str) -> SummonerDTO:
        """Fetch summoner data, refreshing the stored identity if one exists."""
        async with await self._client() as client:
            summoner = await client.get_summoner_by_puuid(puuid)

        try:
            identity = await self.store.get_identity(puuid)
            if identity is not None:
                await self.store.upsert_identity(
                    identity.model_copy(
                        update={
                            "summoner_id": summoner.id,
                            "account_id": summoner.account_id,
                            "summoner_level": summoner.summoner_level,
                            "profile_icon_id": summoner.profile_icon_id,
                        }
                    )
                )
        except PersistenceError as e:
            logger.warning("Failed to refresh identity", puuid=puuid, error=str(e))
        return summoner
