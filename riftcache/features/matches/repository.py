"""Repository pattern implementation for cached matches.

This module encapsulates all SQL for match artifacts, their participant
rows and per-player sync metadata.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import structlog
from sqlalchemy import desc, func, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession

from .orm_models import MatchCacheMetadataORM, MatchORM, ParticipantStatORM
from .schemas import MatchRecord, ParticipantStat

logger = structlog.get_logger(__name__)


class MatchRepositoryInterface(ABC):
    """Interface for match repository following Repository pattern."""

    @abstractmethod
    async def insert_if_absent(self, record: MatchRecord) -> bool:
        """Insert a match unless its id is already stored.

        Args:
            record: Match to store

        Returns:
            True if a new row was written, False for a duplicate id
        """
        pass

    @abstractmethod
    async def exists(self, match_id: str) -> bool:
        """Check whether a match id is stored."""
        pass

    @abstractmethod
    async def has_participants(self, match_id: str) -> bool:
        """Check whether participant rows exist for a match."""
        pass

    @abstractmethod
    async def get_by_id(self, match_id: str) -> Optional[MatchORM]:
        """Get match by ID."""
        pass

    @abstractmethod
    async def find_by_player(self, puuid: str, limit: int) -> list[MatchORM]:
        """Find matches a player took part in, newest first.

        Args:
            puuid: Player PUUID
            limit: Maximum number of matches to return

        Returns:
            Distinct MatchORM rows ordered by game creation, descending
        """
        pass

    @abstractmethod
    async def add_participants(self, stats: Sequence[ParticipantStat]) -> int:
        """Append participant rows in a single statement.

        Returns:
            Number of rows written
        """
        pass

    @abstractmethod
    async def participant_stats_for_player(
        self, puuid: str, limit: int
    ) -> list[ParticipantStatORM]:
        """Get a player's participant rows ordered by the parent match's
        creation time, newest first."""
        pass


class SQLAlchemyMatchRepository(MatchRepositoryInterface):
    """SQLAlchemy implementation of match repository."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy async session
        """
        self.db = db

    async def insert_if_absent(self, record: MatchRecord) -> bool:
        stmt = (
            insert(MatchORM)
            .values(**record.model_dump())
            .on_conflict_do_nothing(index_elements=[MatchORM.match_id])
        )
        result = await self.db.execute(stmt)
        inserted = result.rowcount == 1

        logger.debug("match_insert", match_id=record.match_id, inserted=inserted)
        return inserted

    async def exists(self, match_id: str) -> bool:
        result = await self.db.execute(
            select(func.count()).select_from(MatchORM).where(MatchORM.match_id == match_id)
        )
        return result.scalar_one() > 0

    async def has_participants(self, match_id: str) -> bool:
        """Check whether any participant row references the match."""
        result = await self.db.execute(
            select(ParticipantStatORM.id)
            .where(ParticipantStatORM.match_id == match_id)
            .limit(1)
        )
        return result.first() is not None

    async def get_by_id(self, match_id: str) -> Optional[MatchORM]:
        result = await self.db.execute(
            select(MatchORM).where(MatchORM.match_id == match_id)
        )
        return result.scalar_one_or_none()

    async def find_by_player(self, puuid: str, limit: int) -> list[MatchORM]:
        stmt = (
            select(MatchORM)
            .join(ParticipantStatORM, ParticipantStatORM.match_id == MatchORM.match_id)
            .where(ParticipantStatORM.puuid == puuid)
            .distinct()
            .order_by(desc(MatchORM.game_creation))
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def recent(self, limit: int) -> list[MatchORM]:
        """Most recently played matches across all players."""
        result = await self.db.execute(
            select(MatchORM).order_by(desc(MatchORM.game_creation)).limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_player(self, puuid: str) -> int:
        result = await self.db.execute(
            select(func.count(func.distinct(ParticipantStatORM.match_id))).where(
                ParticipantStatORM.puuid == puuid
            )
        )
        return result.scalar_one()

    async def add_participants(self, stats: Sequence[ParticipantStat]) -> int:
        if not stats:
            return 0
        await self.db.execute(
            insert(ParticipantStatORM).values([stat.model_dump() for stat in stats])
        )
        return len(stats)

    async def participant_stats_for_player(
        self, puuid: str, limit: int
    ) -> list[ParticipantStatORM]:
        stmt = (
            select(ParticipantStatORM)
            .join(MatchORM, ParticipantStatORM.match_id == MatchORM.match_id)
            .where(ParticipantStatORM.puuid == puuid)
            .order_by(desc(MatchORM.game_creation), desc(ParticipantStatORM.id))
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # Sync metadata

    async def upsert_sync_metadata(
        self,
        puuid: str,
        last_match_id: Optional[str],
        total_cached: int,
        fetched_at: int,
    ) -> None:
        stmt = insert(MatchCacheMetadataORM).values(
            puuid=puuid,
            last_match_id=last_match_id,
            last_fetched=fetched_at,
            total_cached=total_cached,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[MatchCacheMetadataORM.puuid],
            set_={
                "last_match_id": stmt.excluded.last_match_id,
                "last_fetched": stmt.excluded.last_fetched,
                "total_cached": stmt.excluded.total_cached,
            },
        )
        await self.db.execute(stmt)

    async def get_sync_metadata(self, puuid: str) -> Optional[MatchCacheMetadataORM]:
        result = await self.db.execute(
            select(MatchCacheMetadataORM).where(MatchCacheMetadataORM.puuid == puuid)
        )
        return result.scalar_one_or_none()
