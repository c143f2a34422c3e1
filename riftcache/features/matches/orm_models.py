"""SQLAlchemy 2.0 ORM models for cached matches.

Match rows are immutable: written once per match id and never updated.
Participant rows are flattened from the match payload at insertion time and
share that immutability.
"""

from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from riftcache.core.models import Base


class MatchORM(Base):
    """Immutable match artifact with denormalized query fields."""

    __tablename__ = "matches"
    __table_args__ = (Index("idx_matches_game_creation", "game_creation"),)

    # Primary key - match ID issued by Riot, never generated locally
    match_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    game_creation: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Game creation timestamp in milliseconds since epoch",
    )
    game_duration: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Game duration in seconds"
    )
    game_mode: Mapped[str] = mapped_column(String(32), nullable=False)
    game_type: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    queue_id: Mapped[int] = mapped_column(Integer, nullable=False)
    map_id: Mapped[int] = mapped_column(Integer, nullable=False)
    platform_id: Mapped[str] = mapped_column(String(8), nullable=False)
    game_version: Mapped[str] = mapped_column(String(32), nullable=False)

    # Full API payload, serialized JSON
    data: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, comment="Unix epoch seconds when cached"
    )

    participants = relationship("ParticipantStatORM", back_populates="match")

    def __repr__(self) -> str:
        """Return string representation of the match."""
        return f"<MatchORM(match_id='{self.match_id}', queue_id={self.queue_id}, game_creation={self.game_creation})>"


class ParticipantStatORM(Base):
    """Per-player statistics for one match."""

    __tablename__ = "participant_stats"
    __table_args__ = (
        Index("idx_participant_stats_puuid", "puuid"),
        Index("idx_participant_stats_match_id", "match_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    match_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("matches.match_id"), nullable=False
    )
    puuid: Mapped[str] = mapped_column(String(78), nullable=False)

    champion_id: Mapped[int] = mapped_column(Integer, nullable=False)
    champion_name: Mapped[str] = mapped_column(String(64), nullable=False)
    team_id: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    win: Mapped[bool] = mapped_column(Boolean, nullable=False)

    kills: Mapped[int] = mapped_column(Integer, nullable=False)
    deaths: Mapped[int] = mapped_column(Integer, nullable=False)
    assists: Mapped[int] = mapped_column(Integer, nullable=False)

    damage_dealt: Mapped[int] = mapped_column(Integer, nullable=False)
    damage_taken: Mapped[int] = mapped_column(Integer, nullable=False)
    gold_earned: Mapped[int] = mapped_column(Integer, nullable=False)
    cs: Mapped[int] = mapped_column(Integer, nullable=False)
    vision_score: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    match = relationship("MatchORM", back_populates="participants")

    def __repr__(self) -> str:
        return f"<ParticipantStatORM(match_id='{self.match_id}', puuid='{self.puuid}', champion='{self.champion_name}')>"


class MatchCacheMetadataORM(Base):
    """Bookkeeping of what has been synchronized per player."""

    __tablename__ = "match_cache_metadata"

    puuid: Mapped[str] = mapped_column(String(78), primary_key=True)
    last_match_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    last_fetched: Mapped[int] = mapped_column(BigInteger, nullable=False)
    total_cached: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
