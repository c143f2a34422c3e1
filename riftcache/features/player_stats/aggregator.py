"""
Player statistics aggregation.

Derives a summary (win rate, per-game averages, KDA) from a player's cached
participant rows. The aggregation is pure: it never touches the store and
its result is never persisted.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Protocol, Sequence

import structlog

logger = structlog.get_logger(__name__)

# KDA multiplier for deathless samples
PERFECT_KDA_MULTIPLIER = 10


class ParticipantRow(Protocol):
    win: bool
    kills: int
    deaths: int
    assists: int
    cs: int
    damage_dealt: int
    vision_score: int


@dataclass
class PlayerStatsSummary:
    """Aggregated statistics over a sample of games."""

    total_games: int = 0
    wins: int = 0
    losses: int = 0
    winrate: float = 0.0
    avg_kills: float = 0.0
    avg_deaths: float = 0.0
    avg_assists: float = 0.0
    kda: float = 0.0
    avg_cs: float = 0.0
    avg_damage_dealt: float = 0.0
    avg_vision_score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PlayerStatsAggregator:
    """Computes a PlayerStatsSummary from participant rows."""

    def __init__(self, sample_size: int = 100):
        """
        Initialize the aggregator.

        Args:
            sample_size: Maximum number of rows considered, newest first
        """
        self.sample_size = sample_size

    def calculate(self, rows: Sequence[ParticipantRow]) -> PlayerStatsSummary:
        """
        Aggregate participant rows.

        Args:
            rows: Participant rows ordered newest first

        Returns:
            PlayerStatsSummary; all zeros when there are no rows
        """
        sample = list(rows[: self.sample_size])
        if not sample:
            return PlayerStatsSummary()

        total_games = len(sample)
        wins = sum(1 for row in sample if row.win)

        avg_kills = self._mean(sample, "kills")
        avg_deaths = self._mean(sample, "deaths")
        avg_assists = self._mean(sample, "assists")

        summary = PlayerStatsSummary(
            total_games=total_games,
            wins=wins,
            losses=total_games - wins,
            winrate=wins / total_games * 100,
            avg_kills=avg_kills,
            avg_deaths=avg_deaths,
            avg_assists=avg_assists,
            kda=self._kda(avg_kills, avg_deaths, avg_assists),
            avg_cs=self._mean(sample, "cs"),
            avg_damage_dealt=self._mean(sample, "damage_dealt"),
            avg_vision_score=self._mean(sample, "vision_score"),
        )

        logger.debug(
            "player_stats_aggregated",
            total_games=total_games,
            winrate=summary.winrate,
            kda=summary.kda,
        )
        return summary

    @staticmethod
    def _mean(sample: Sequence[ParticipantRow], field: str) -> float:
        return sum(getattr(row, field) for row in sample) / len(sample)

    @staticmethod
    def _kda(avg_kills: float, avg_deaths: float, avg_assists: float) -> float:
        if avg_deaths == 0:
            return (avg_kills + avg_assists) * PERFECT_KDA_MULTIPLIER
        return (avg_kills + avg_assists) / avg_deaths
