"""
Persistent cache store.

``CacheStore`` is the single entry point for reading and writing cached
entities. Every method opens its own session and commits one statement,
so writes to different entity families are never grouped in a
transaction. Database failures are raised as ``PersistenceError``.
"""

from typing import Callable, List, Optional, Sequence

import structlog

from riftcache.core.database import DatabaseManager
from riftcache.core.decorators import store_operation
from riftcache.core.models import epoch_seconds
from riftcache.features.matches.repository import SQLAlchemyMatchRepository
from riftcache.features.matches.schemas import (
    MatchRecord,
    ParticipantStat,
    SyncMetadata,
)
from riftcache.features.players.repository import SQLAlchemyPlayerRepository
from riftcache.features.players.schemas import PlayerIdentity
from riftcache.features.ranks.repository import SQLAlchemyRankedRepository
from riftcache.features.ranks.schemas import RankedSnapshot
from riftcache.features.settings.repository import SettingsRepository

logger = structlog.get_logger(__name__)

DEFAULT_RANKED_TTL_SECONDS = 300


class CacheStore:
    """Durable, keyed storage of every cached entity family."""

    def __init__(
        self,
        db_manager: DatabaseManager,
        clock: Callable[[], int] = epoch_seconds,
        ranked_ttl: int = DEFAULT_RANKED_TTL_SECONDS,
    ):
        """
        Initialize the store.

        Args:
            db_manager: Owner of the engine and session factory
            clock: Returns the current time in Unix-epoch seconds
            ranked_ttl: Seconds a ranked snapshot stays valid
        """
        self.db = db_manager
        self.clock = clock
        self.ranked_ttl = ranked_ttl

    async def initialize(self) -> None:
        """Create any missing tables."""
        await self.db.init()

    # Identity

    @store_operation("upsert_identity")
    async def upsert_identity(self, identity: PlayerIdentity) -> PlayerIdentity:
        """Insert or replace an identity, stamping ``last_updated``."""
        stamped = identity.model_copy(update={"last_updated": self.clock()})
        async with self.db.get_session() as session:
            await SQLAlchemyPlayerRepository(session).upsert(stamped)
            await session.commit()
        return stamped

    @store_operation("get_identity")
    async def get_identity(self, puuid: str) -> Optional[PlayerIdentity]:
        async with self.db.get_session() as session:
            row = await SQLAlchemyPlayerRepository(session).get_by_puuid(puuid)
            return PlayerIdentity.model_validate(row) if row else None

    @store_operation("find_identity_by_riot_id")
    async def find_identity_by_riot_id(
        self, game_name: str, tag_line: str
    ) -> Optional[PlayerIdentity]:
        async with self.db.get_session() as session:
            row = await SQLAlchemyPlayerRepository(session).find_by_riot_id(
                game_name, tag_line
            )
            return PlayerIdentity.model_validate(row) if row else None

    # Matches

    @store_operation("insert_match")
    async def insert_match(self, record: MatchRecord) -> bool:
        """Insert a match unless already present.

        Returns:
            True if a new row was written; False if the id was already cached
        """
        async with self.db.get_session() as session:
            inserted = await SQLAlchemyMatchRepository(session).insert_if_absent(
                record
            )
            await session.commit()
        if not inserted:
            logger.debug("Match already cached", match_id=record.match_id)
        return inserted

    @store_operation("match_exists")
    async def match_exists(self, match_id: str) -> bool:
        async with self.db.get_session() as session:
            return await SQLAlchemyMatchRepository(session).exists(match_id)

    @store_operation("match_has_participants")
    async def match_has_participants(self, match_id: str) -> bool:
        async with self.db.get_session() as session:
            return await SQLAlchemyMatchRepository(session).has_participants(
                match_id
            )

    @store_operation("get_match")
    async def get_match(self, match_id: str) -> Optional[MatchRecord]:
        async with self.db.get_session() as session:
            row = await SQLAlchemyMatchRepository(session).get_by_id(match_id)
            return MatchRecord.model_validate(row) if row else None

    @store_operation("get_matches_for_player")
    async def get_matches_for_player(
        self, puuid: str, limit: int = 20
    ) -> List[MatchRecord]:
        """Matches the player appears in, newest first, without duplicates."""
        async with self.db.get_session() as session:
            rows = await SQLAlchemyMatchRepository(session).find_by_player(
                puuid, limit
            )
            return [MatchRecord.model_validate(row) for row in rows]

    @store_operation("get_recent_matches")
    async def get_recent_matches(self, limit: int = 20) -> List[MatchRecord]:
        async with self.db.get_session() as session:
            rows = await SQLAlchemyMatchRepository(session).recent(limit)
            return [MatchRecord.model_validate(row) for row in rows]

    @store_operation("count_matches_for_player")
    async def count_matches_for_player(self, puuid: str) -> int:
        async with self.db.get_session() as session:
            return await SQLAlchemyMatchRepository(session).count_for_player(puuid)

    # Participant stats

    @store_operation("add_participant_stat")
    async def add_participant_stat(self, stat: ParticipantStat) -> None:
        """Append one row; duplicates are not checked."""
        await self._append_participants([stat])

    @store_operation("add_participant_stats")
    async def add_participant_stats(self, stats: Sequence[ParticipantStat]) -> int:
        return await self._append_participants(stats)

    async def _append_participants(self, stats: Sequence[ParticipantStat]) -> int:
        async with self.db.get_session() as session:
            written = await SQLAlchemyMatchRepository(session).add_participants(stats)
            await session.commit()
        return written

    @store_operation("get_participant_stats")
    async def get_participant_stats(
        self, puuid: str, limit: int = 100
    ) -> List[ParticipantStat]:
        """A player's rows ordered by the parent match's creation time, newest first."""
        async with self.db.get_session() as session:
            rows = await SQLAlchemyMatchRepository(
                session
            ).participant_stats_for_player(puuid, limit)
            return [ParticipantStat.model_validate(row) for row in rows]

    # Ranked snapshots

    @store_operation("upsert_ranked_snapshot")
    async def upsert_ranked_snapshot(self, snapshot: RankedSnapshot) -> RankedSnapshot:
        """Replace the player's snapshot, stamped with the current time."""
        stamped = snapshot.model_copy(update={"cached_at": self.clock()})
        async with self.db.get_session() as session:
            await SQLAlchemyRankedRepository(session).upsert(
                stamped, stamped.cached_at
            )
            await session.commit()
        return stamped

    @store_operation("get_ranked_snapshot")
    async def get_ranked_snapshot(self, puuid: str) -> Optional[RankedSnapshot]:
        """The snapshot if ``now - cached_at < ranked_ttl``, else None."""
        cutoff = self.clock() - self.ranked_ttl
        async with self.db.get_session() as session:
            row = await SQLAlchemyRankedRepository(session).get_fresh(puuid, cutoff)
            return RankedSnapshot.from_orm_row(row) if row else None

    # Sync metadata

    @store_operation("upsert_sync_metadata")
    async def upsert_sync_metadata(
        self, puuid: str, last_match_id: Optional[str], total_cached: int
    ) -> SyncMetadata:
        fetched_at = self.clock()
        async with self.db.get_session() as session:
            await SQLAlchemyMatchRepository(session).upsert_sync_metadata(
                puuid, last_match_id, total_cached, fetched_at
            )
            await session.commit()
        return SyncMetadata(
            puuid=puuid,
            last_match_id=last_match_id,
            last_fetched=fetched_at,
            total_cached=total_cached,
        )

    @store_operation("get_sync_metadata")
    async def get_sync_metadata(self, puuid: str) -> Optional[SyncMetadata]:
        async with self.db.get_session() as session:
            row = await SQLAlchemyMatchRepository(session).get_sync_metadata(puuid)
            return SyncMetadata.model_validate(row) if row else None

    # Settings

    @store_operation("get_setting")
    async def get_setting(self, key: str) -> Optional[str]:
        async with self.db.get_session() as session:
            return await SettingsRepository(session).get(key)

    @store_operation("set_setting")
    async def set_setting(self, key: str, value: str) -> None:
        async with self.db.get_session() as session:
            await SettingsRepository(session).set(key, value, self.clock())
            await session.commit()
