"""Pydantic models for Riot API response data.

Match models keep unknown fields (``extra="allow"``) so a payload dumped with
``by_alias=True`` carries everything the API sent, which is what the match
cache stores.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import RANKED_SOLO_QUEUE


class AccountDTO(BaseModel):
    """Riot Account information."""

    puuid: str
    game_name: str = Field(..., alias="gameName")
    tag_line: str = Field(..., alias="tagLine")

    model_config = ConfigDict(populate_by_name=True)


class SummonerDTO(BaseModel):
    """League of Legends Summoner information."""

    id: Optional[str] = None
    account_id: Optional[str] = Field(None, alias="accountId")
    puuid: str
    profile_icon_id: int = Field(..., alias="profileIconId")
    revision_date: int = Field(0, alias="revisionDate")
    summoner_level: int = Field(..., alias="summonerLevel")

    model_config = ConfigDict(populate_by_name=True)


class ParticipantDTO(BaseModel):
    """Match participant information."""

    puuid: str
    summoner_name: Optional[str] = Field(None, alias="summonerName")
    riot_id_game_name: Optional[str] = Field(None, alias="riotIdGameName")
    riot_id_tagline: Optional[str] = Field(None, alias="riotIdTagline")

    champion_id: int = Field(..., alias="championId")
    champion_name: str = Field(..., alias="championName")
    team_id: int = Field(..., alias="teamId")
    team_position: Optional[str] = Field(None, alias="teamPosition")
    individual_position: Optional[str] = Field(None, alias="individualPosition")
    win: bool

    kills: int
    deaths: int
    assists: int

    total_damage_dealt_to_champions: int = Field(
        0, alias="totalDamageDealtToChampions"
    )
    total_damage_taken: int = Field(0, alias="totalDamageTaken")
    gold_earned: int = Field(0, alias="goldEarned")
    total_minions_killed: int = Field(0, alias="totalMinionsKilled")
    neutral_minions_killed: int = Field(0, alias="neutralMinionsKilled")
    vision_score: int = Field(0, alias="visionScore")

    @property
    def role(self) -> str:
        """Position played, preferring the team-assigned one."""
        return self.team_position or self.individual_position or ""

    @property
    def creep_score(self) -> int:
        return self.total_minions_killed + self.neutral_minions_killed

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class TeamDTO(BaseModel):
    """Team result and objectives for one side."""

    team_id: int = Field(..., alias="teamId")
    win: bool

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class MatchInfoDTO(BaseModel):
    """Match information."""

    game_creation: int = Field(..., alias="gameCreation")
    game_duration: int = Field(..., alias="gameDuration")
    game_mode: str = Field(..., alias="gameMode")
    game_type: str = Field("", alias="gameType")
    queue_id: int = Field(..., alias="queueId")
    map_id: int = Field(..., alias="mapId")
    platform_id: str = Field(..., alias="platformId")
    game_version: str = Field(..., alias="gameVersion")
    participants: List[ParticipantDTO]
    teams: List[TeamDTO] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class MatchMetadataDTO(BaseModel):
    """Match metadata."""

    match_id: str = Field(..., alias="matchId")
    data_version: str = Field("", alias="dataVersion")
    participants: List[str]

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class MatchDTO(BaseModel):
    """Complete match data."""

    metadata: MatchMetadataDTO
    info: MatchInfoDTO

    @property
    def match_id(self) -> str:
        """Get match ID from metadata."""
        return self.metadata.match_id

    def to_payload(self) -> dict:
        """Serialize back to the camelCase JSON shape the API returned."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class LeagueEntryDTO(BaseModel):
    """League entry information.

    Every ranked field is optional; a missing queue type means solo queue.
    """

    queue_type: str = Field(RANKED_SOLO_QUEUE, alias="queueType")
    tier: Optional[str] = None
    rank: Optional[str] = None
    league_points: Optional[int] = Field(None, alias="leaguePoints")
    wins: Optional[int] = None
    losses: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)
