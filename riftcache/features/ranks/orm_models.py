"""SQLAlchemy 2.0 ORM model for cached ranked standings."""

from typing import Optional

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from riftcache.core.models import Base
from riftcache.core.riot_api.constants import RANKED_SOLO_QUEUE


class RankedStatsCacheORM(Base):
    """Latest ranked snapshot per player, overwritten on every refresh.

    A row with no tier records a player who was unranked when fetched.
    """

    __tablename__ = "ranked_stats_cache"

    puuid: Mapped[str] = mapped_column(String(78), primary_key=True)

    tier: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    rank_value: Mapped[Optional[str]] = mapped_column(
        String(4), nullable=True, comment="Division within the tier (I-IV)"
    )
    league_points: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    wins: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    losses: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    queue_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=RANKED_SOLO_QUEUE
    )

    cached_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, comment="Unix epoch seconds when fetched"
    )

    def __repr__(self) -> str:
        return f"<RankedStatsCacheORM(puuid='{self.puuid}', tier='{self.tier}', rank='{self.rank_value}')>"
