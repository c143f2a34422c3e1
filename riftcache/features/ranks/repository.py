"""Repository for the ranked snapshot cache."""

from abc import ABC, abstractmethod
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession

from .orm_models import RankedStatsCacheORM
from .schemas import RankedSnapshot

logger = structlog.get_logger(__name__)


class RankedRepositoryInterface(ABC):
    """Interface for ranked snapshot repository."""

    @abstractmethod
    async def upsert(self, snapshot: RankedSnapshot, cached_at: int) -> None:
        """Replace the player's snapshot, stamping it with ``cached_at``."""
        pass

    @abstractmethod
    async def get_fresh(self, puuid: str, cutoff: int) -> Optional[RankedStatsCacheORM]:
        """Get the snapshot only if ``cached_at`` is strictly after ``cutoff``.

        :param puuid: Player's unique identifier
        :param cutoff: ``now - ttl``; rows at or before it are stale
        """
        pass


class SQLAlchemyRankedRepository(RankedRepositoryInterface):
    """SQLAlchemy implementation of ranked snapshot repository."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def upsert(self, snapshot: RankedSnapshot, cached_at: int) -> None:
        values = {
            "puuid": snapshot.puuid,
            "tier": snapshot.tier,
            "rank_value": snapshot.rank,
            "league_points": snapshot.league_points,
            "wins": snapshot.wins,
            "losses": snapshot.losses,
            "queue_type": snapshot.queue_type,
            "cached_at": cached_at,
        }
        stmt = insert(RankedStatsCacheORM).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[RankedStatsCacheORM.puuid],
            set_={key: stmt.excluded[key] for key in values if key != "puuid"},
        )
        await self.db.execute(stmt)
        logger.debug("ranked_snapshot_upserted", puuid=snapshot.puuid, tier=snapshot.tier)

    async def get_fresh(self, puuid: str, cutoff: int) -> Optional[RankedStatsCacheORM]:
        result = await self.db.execute(
            select(RankedStatsCacheORM).where(
                RankedStatsCacheORM.puuid == puuid,
                RankedStatsCacheORM.cached_at > cutoff,
            )
        )
        return result.scalar_one_or_none()
