"""Shared fixtures: in-memory store, controllable clock and sample payloads."""

from typing import Any, Callable, Dict, List, Optional

import pytest
import pytest_asyncio

from riftcache.core.database import DatabaseManager
from riftcache.features.matches.schemas import ParticipantStat
from riftcache.store import CacheStore

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    """Callable clock returning a settable epoch-seconds value."""

    def __init__(self, now: int):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock(1_700_000_000)


@pytest_asyncio.fixture
async def db_manager():
    """Create an initialized in-memory database."""
    manager = DatabaseManager(MEMORY_URL)
    await manager.init()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def store(db_manager, clock):
    return CacheStore(db_manager, clock=clock, ranked_ttl=300)


def _participant(
    puuid: str,
    team_id: int,
    win: bool,
    kills: int = 5,
    deaths: int = 3,
    assists: int = 7,
    champion: str = "Ahri",
) -> Dict[str, Any]:
    return {
        "puuid": puuid,
        "riotIdGameName": puuid.title(),
        "riotIdTagline": "EUW",
        "championId": 103,
        "championName": champion,
        "teamId": team_id,
        "teamPosition": "MIDDLE",
        "individualPosition": "MIDDLE",
        "win": win,
        "kills": kills,
        "deaths": deaths,
        "assists": assists,
        "totalDamageDealtToChampions": 21000,
        "totalDamageTaken": 15000,
        "goldEarned": 12000,
        "totalMinionsKilled": 180,
        "neutralMinionsKilled": 20,
        "visionScore": 25,
        "challenges": {"kda": 4.0},
    }


@pytest.fixture
def make_match_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for Riot match-v5 payloads with two participants."""

    def factory(
        match_id: str = "EUW1_1234567890",
        game_creation: int = 1_710_000_000_000,
        puuids: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        puuids = puuids or ["puuid-alice", "puuid-bob"]
        participants = [
            _participant(puuid, 100 if i % 2 == 0 else 200, win=i % 2 == 0)
            for i, puuid in enumerate(puuids)
        ]
        return {
            "metadata": {
                "matchId": match_id,
                "dataVersion": "2",
                "participants": puuids,
            },
            "info": {
                "gameCreation": game_creation,
                "gameDuration": 1800,
                "gameMode": "CLASSIC",
                "gameType": "MATCHED_GAME",
                "queueId": 420,
                "mapId": 11,
                "platformId": "EUW1",
                "gameVersion": "14.20.555.5555",
                "participants": participants,
                "teams": [
                    {"teamId": 100, "win": True, "bans": []},
                    {"teamId": 200, "win": False, "bans": []},
                ],
            },
        }

    return factory


@pytest.fixture
def make_stat() -> Callable[..., ParticipantStat]:
    """Factory for participant rows."""

    def factory(
        match_id: str = "EUW1_1",
        puuid: str = "puuid-alice",
        win: bool = True,
        kills: int = 5,
        deaths: int = 3,
        assists: int = 7,
        **overrides: Any,
    ) -> ParticipantStat:
        values = {
            "match_id": match_id,
            "puuid": puuid,
            "champion_id": 103,
            "champion_name": "Ahri",
            "team_id": 100,
            "role": "MIDDLE",
            "win": win,
            "kills": kills,
            "deaths": deaths,
            "assists": assists,
            "damage_dealt": 20000,
            "damage_taken": 15000,
            "gold_earned": 12000,
            "cs": 200,
            "vision_score": 25,
            "created_at": 1_700_000_000,
        }
        values.update(overrides)
        return ParticipantStat(**values)

    return factory
