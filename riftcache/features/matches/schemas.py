"""Pydantic schemas for cached matches, participant rows and sync metadata."""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class MatchRecord(BaseModel):
    """One stored match artifact."""

    match_id: str
    game_creation: int
    game_duration: int
    game_mode: str
    game_type: str = ""
    queue_id: int
    map_id: int
    platform_id: str
    game_version: str
    data: str = Field(..., description="Full match payload as JSON text")
    created_at: int = 0

    model_config = ConfigDict(from_attributes=True)

    def payload(self) -> Dict[str, Any]:
        """Decode the stored payload.

        :raises ValueError: If the blob is not a JSON object
        """
        decoded = json.loads(self.data)
        if not isinstance(decoded, dict):
            raise ValueError("match payload is not a JSON object")
        return decoded


class ParticipantStat(BaseModel):
    """Flattened per-player statistics for one match."""

    match_id: str
    puuid: str
    champion_id: int
    champion_name: str
    team_id: int
    role: str = ""
    win: bool
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    gold_earned: int = 0
    cs: int = 0
    vision_score: int = 0
    created_at: int = 0

    model_config = ConfigDict(from_attributes=True)


class SyncMetadata(BaseModel):
    """What has been synchronized for a player."""

    puuid: str
    last_match_id: Optional[str] = None
    last_fetched: int
    total_cached: int = 0

    model_config = ConfigDict(from_attributes=True)
