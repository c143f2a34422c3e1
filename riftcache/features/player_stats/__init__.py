"""Summary statistics derived from cached participant rows."""

from .aggregator import PlayerStatsAggregator, PlayerStatsSummary

__all__ = ["PlayerStatsAggregator", "PlayerStatsSummary"]
