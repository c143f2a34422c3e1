"""SQLAlchemy 2.0 ORM model for cached player identity records."""

from typing import Optional

from sqlalchemy import BigInteger, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from riftcache.core.models import Base


class SummonerORM(Base):
    """Identity record for one player, upserted whenever fresh data is seen."""

    __tablename__ = "summoner"
    __table_args__ = (Index("idx_summoner_riot_id", "game_name", "tag_line"),)

    # Riot PUUID is an opaque base64 string, not a standard UUID
    puuid: Mapped[str] = mapped_column(String(78), primary_key=True)

    game_name: Mapped[str] = mapped_column(String(128), nullable=False)
    tag_line: Mapped[str] = mapped_column(String(16), nullable=False)

    # Encrypted ids, needed by the league endpoint
    summoner_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    account_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    summoner_level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    profile_icon_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    last_updated: Mapped[int] = mapped_column(
        BigInteger, nullable=False, comment="Unix epoch seconds (UTC)"
    )

    def __repr__(self) -> str:
        """Return string representation of the identity."""
        return f"<SummonerORM(puuid='{self.puuid}', riot_id='{self.full_riot_id}')>"

    @property
    def full_riot_id(self) -> str:
        """Get the full Riot ID (gameName#tagLine)."""
        return f"{self.game_name}#{self.tag_line}"
