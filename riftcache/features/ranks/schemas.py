"""Pydantic schemas for ranked snapshots."""

from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from riftcache.core.riot_api.constants import RANKED_SOLO_QUEUE
from riftcache.core.riot_api.models import LeagueEntryDTO


class RankedSnapshot(BaseModel):
    """A player's ranked standing as of ``cached_at``."""

    puuid: str
    tier: Optional[str] = None
    rank: Optional[str] = Field(None, description="Division, stored as rank_value")
    league_points: Optional[int] = None
    wins: Optional[int] = None
    losses: Optional[int] = None
    queue_type: str = RANKED_SOLO_QUEUE
    cached_at: int = 0

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_ranked(self) -> bool:
        return self.tier is not None

    @property
    def win_rate(self) -> float:
        total_games = (self.wins or 0) + (self.losses or 0)
        if total_games == 0:
            return 0.0
        return ((self.wins or 0) / total_games) * 100

    @classmethod
    def from_orm_row(cls, row) -> "RankedSnapshot":
        """Build from a ``RankedStatsCacheORM`` row (``rank_value`` -> ``rank``)."""
        return cls(
            puuid=row.puuid,
            tier=row.tier,
            rank=row.rank_value,
            league_points=row.league_points,
            wins=row.wins,
            losses=row.losses,
            queue_type=row.queue_type,
            cached_at=row.cached_at,
        )

    @classmethod
    def from_league_entry(
        cls, puuid: str, entry: Optional[LeagueEntryDTO]
    ) -> "RankedSnapshot":
        """Snapshot an entry; ``None`` yields an unranked snapshot."""
        if entry is None:
            return cls(puuid=puuid)
        return cls(
            puuid=puuid,
            tier=entry.tier,
            rank=entry.rank,
            league_points=entry.league_points,
            wins=entry.wins,
            losses=entry.losses,
            queue_type=entry.queue_type,
        )


def select_league_entry(
    entries: Sequence[LeagueEntryDTO],
) -> Optional[LeagueEntryDTO]:
    """Pick the solo queue entry, else the first one, else None."""
    for entry in entries:
        if entry.queue_type == RANKED_SOLO_QUEUE:
            return entry
    return entries[0] if entries else None
