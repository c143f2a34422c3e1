"""Pydantic schemas for player identity records."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PlayerIdentity(BaseModel):
    """Identity record as stored and returned by the cache."""

    puuid: str = Field(..., min_length=1, description="Player's PUUID")
    game_name: str = Field(..., description="Riot ID game name")
    tag_line: str = Field(..., description="Riot ID tag line")
    summoner_id: Optional[str] = Field(None, description="Encrypted summoner ID")
    account_id: Optional[str] = Field(None, description="Encrypted account ID")
    summoner_level: Optional[int] = Field(None, description="Account level")
    profile_icon_id: Optional[int] = Field(None, description="Profile icon ID")
    last_updated: int = Field(0, description="Unix epoch seconds of the last upsert")

    model_config = ConfigDict(from_attributes=True)

    @property
    def full_riot_id(self) -> str:
        return f"{self.game_name}#{self.tag_line}"
