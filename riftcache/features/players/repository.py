"""Repository pattern implementation for player identities.

Provides collection-like access to identity records and isolates the SQL
from the cache store.
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession

from .orm_models import SummonerORM
from .schemas import PlayerIdentity

logger = structlog.get_logger(__name__)


class PlayerRepositoryInterface(ABC):
    """Interface for player identity repository."""

    @abstractmethod
    async def upsert(self, identity: PlayerIdentity) -> None:
        """Insert or replace the identity keyed by PUUID.

        :param identity: Identity with every field set; all overwrite on conflict
        """
        pass

    @abstractmethod
    async def get_by_puuid(self, puuid: str) -> Optional[SummonerORM]:
        """Get identity by PUUID.

        :param puuid: Player's unique identifier
        :returns: SummonerORM if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_riot_id(
        self, game_name: str, tag_line: str
    ) -> Optional[SummonerORM]:
        """Find identity by Riot ID, case-insensitively.

        :param game_name: Riot ID game name
        :param tag_line: Riot ID tag line
        :returns: Most recently updated identity, or None
        """
        pass


class SQLAlchemyPlayerRepository(PlayerRepositoryInterface):
    """SQLAlchemy implementation of the player identity repository."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def upsert(self, identity: PlayerIdentity) -> None:
        values = identity.model_dump()
        stmt = insert(SummonerORM).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[SummonerORM.puuid],
            set_={
                key: stmt.excluded[key] for key in values if key != "puuid"
            },
        )
        await self.db.execute(stmt)
        logger.debug("identity_upserted", puuid=identity.puuid)

    async def get_by_puuid(self, puuid: str) -> Optional[SummonerORM]:
        result = await self.db.execute(
            select(SummonerORM).where(SummonerORM.puuid == puuid)
        )
        return result.scalar_one_or_none()

    async def find_by_riot_id(
        self, game_name: str, tag_line: str
    ) -> Optional[SummonerORM]:
        stmt = (
            select(SummonerORM)
            .where(
                func.lower(SummonerORM.game_name) == game_name.lower(),
                func.lower(SummonerORM.tag_line) == tag_line.lower(),
            )
            .order_by(SummonerORM.last_updated.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
