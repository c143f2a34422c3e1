"""
Command facade exposed to the desktop shell.

Every command returns a ``CommandResult``. Failures carry a message of the
form ``"<stage>: <detail>"`` where stage is one of config, connect, fetch,
parse or persist.
"""

from typing import Any, Dict, List, Optional

import structlog

from riftcache.core.config import RuntimeConfig, Settings, get_global_settings
from riftcache.core.database import DatabaseManager
from riftcache.core.decorators import CommandResult, command_handler
from riftcache.core.logging import setup_logging
from riftcache.core.riot_api import parse_platform
from riftcache.features.player_stats import PlayerStatsAggregator
from riftcache.features.players.schemas import PlayerIdentity
from riftcache.features.settings.repository import RIOT_API_KEY, RIOT_REGION
from riftcache.orchestrator import CacheOrchestrator, ClientFactory, default_client_factory
from riftcache.store import CacheStore

logger = structlog.get_logger(__name__)

__all__ = ["CacheCommands", "CommandResult"]


class CacheCommands:
    """Shell-facing operations over the cache store and orchestrator."""

    def __init__(
        self,
        store: CacheStore,
        runtime_config: RuntimeConfig,
        orchestrator: CacheOrchestrator,
    ):
        self.store = store
        self.runtime_config = runtime_config
        self.orchestrator = orchestrator

    @classmethod
    def create(
        cls,
        db_manager: Optional[DatabaseManager] = None,
        settings: Optional[Settings] = None,
        client_factory: ClientFactory = default_client_factory,
    ) -> "CacheCommands":
        """Wire the store, runtime config and orchestrator from settings."""
        settings = settings or get_global_settings()
        setup_logging(settings.log_level, settings.log_format)
        db_manager = db_manager or DatabaseManager()

        store = CacheStore(db_manager, ranked_ttl=settings.ranked_cache_ttl_seconds)
        runtime_config = RuntimeConfig.from_settings(settings)
        orchestrator = CacheOrchestrator(
            store,
            runtime_config,
            client_factory=client_factory,
            aggregator=PlayerStatsAggregator(sample_size=settings.stats_sample_size),
        )
        return cls(store, runtime_config, orchestrator)

    # Lifecycle and configuration

    @command_handler("initialize_database")
    async def initialize_database(self) -> Dict[str, Any]:
        """Create tables and load the persisted API key and region."""
        await self.store.initialize()

        current = await self.runtime_config.snapshot()
        api_key = await self.store.get_setting(RIOT_API_KEY) or current.api_key
        region = await self.store.get_setting(RIOT_REGION) or current.region
        await self.runtime_config.update(api_key, region)

        logger.info(
            "Cache initialized",
            region=region,
            api_key="[REDACTED]" if api_key else None,
        )
        return {"api_key_configured": bool(api_key), "region": region}

    @command_handler("initialize_riot_client")
    async def initialize_riot_client(self, api_key: str, region: str) -> Dict[str, Any]:
        """Set the in-memory API key and region for subsequent calls."""
        platform = parse_platform(region)
        await self.runtime_config.update(api_key, platform.value)
        return {"region": platform.value}

    @command_handler("get_api_key")
    async def get_api_key(self) -> Optional[str]:
        return await self.store.get_setting(RIOT_API_KEY)

    @command_handler("set_api_key")
    async def set_api_key(self, api_key: str) -> None:
        """Persist the API key and use it from the next call on."""
        if not api_key.strip():
            raise ValueError("API key must not be empty")
        await self.store.set_setting(RIOT_API_KEY, api_key.strip())
        await self.runtime_config.set_api_key(api_key.strip())

    @command_handler("get_region")
    async def get_region(self) -> str:
        return (await self.runtime_config.snapshot()).region

    @command_handler("set_region")
    async def set_region(self, region: str) -> str:
        platform = parse_platform(region)
        await self.store.set_setting(RIOT_REGION, platform.value)
        await self.runtime_config.set_region(platform.value)
        return platform.value

    @command_handler("close")
    async def close(self) -> None:
        await self.store.db.close()

    # Players

    @command_handler("save_summoner")
    async def save_summoner(
        self,
        puuid: str,
        game_name: str,
        tag_line: str,
        summoner_level: Optional[int] = None,
        profile_icon_id: Optional[int] = None,
        summoner_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        identity = await self.store.upsert_identity(
            PlayerIdentity(
                puuid=puuid,
                game_name=game_name,
                tag_line=tag_line,
                summoner_level=summoner_level,
                profile_icon_id=profile_icon_id,
                summoner_id=summoner_id,
            )
        )
        return identity.model_dump()

    @command_handler("get_summoner")
    async def get_summoner(self, puuid: str) -> Optional[Dict[str, Any]]:
        identity = await self.store.get_identity(puuid)
        return identity.model_dump() if identity else None

    @command_handler("get_account_by_riot_id")
    async def get_account_by_riot_id(
        self, game_name: str, tag_line: str, refresh: bool = False
    ) -> Dict[str, Any]:
        identity = await self.orchestrator.resolve_player(game_name, tag_line, refresh)
        return identity.model_dump()

    @command_handler("get_summoner_by_puuid")
    async def get_summoner_by_puuid(self, puuid: str) -> Dict[str, Any]:
        summoner = await self.orchestrator.get_summoner(puuid)
        return summoner.model_dump(by_alias=True)

    @command_handler("get_player_stats")
    async def get_player_stats(self, puuid: str) -> Dict[str, Any]:
        return (await self.orchestrator.get_player_stats(puuid)).to_dict()

    @command_handler("get_ranked_stats")
    async def get_ranked_stats(
        self, puuid: str, summoner_id: Optional[str] = None
    ) -> Dict[str, Any]:
        snapshot = await self.orchestrator.get_ranked_stats(puuid, summoner_id)
        return snapshot.model_dump()

    # Matches

    @command_handler("fetch_match_history")
    async def fetch_match_history(self, puuid: str, count: int = 20) -> List[str]:
        return await self.orchestrator.fetch_match_ids(puuid, start=0, count=count)

    @command_handler("get_match_details")
    async def get_match_details(self, match_id: str) -> Dict[str, Any]:
        return await self.orchestrator.get_match_details(match_id)

    @command_handler("get_cached_matches")
    async def get_cached_matches(
        self, puuid: str, limit: int = 20
    ) -> List[Dict[str, Any]]:
        return await self.orchestrator.get_cached_matches(puuid, limit)

    @command_handler("get_recent_matches")
    async def get_recent_matches(self, limit: int = 20) -> List[Dict[str, Any]]:
        return await self.orchestrator.get_recent_matches(limit)

    @command_handler("sync_match_history")
    async def sync_match_history(self, puuid: str, count: int = 20) -> Dict[str, Any]:
        return await self.orchestrator.sync_match_history(puuid, count)
