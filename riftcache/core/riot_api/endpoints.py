"""Riot API endpoint definitions and routing information."""

from typing import Optional
from urllib.parse import quote

from .constants import Platform, Region, regional_route


def _segment(value: str) -> str:
    """Percent-encode one URL path segment, slashes included."""
    return quote(value, safe="")


class RiotAPIEndpoints:
    """Riot API endpoint definitions and routing.

    Account and match endpoints are served by the regional cluster, summoner
    and league endpoints by the platform shard. Callers pick the method, the
    routing follows from it.
    """

    def __init__(self, platform: Platform = Platform.EUW1):
        """
        Initialize endpoint configuration.

        Args:
            platform: Platform shard; the regional cluster is derived from it
        """
        self.platform = platform
        self.region = regional_route(platform)

    def get_base_url(self, region: Optional[Region] = None) -> str:
        """Get base URL for regional endpoints."""
        region = region or self.region
        return f"https://{region.value}.api.riotgames.com"

    def get_platform_url(self, platform: Optional[Platform] = None) -> str:
        """Get base URL for platform endpoints."""
        platform = platform or self.platform
        return f"https://{platform.value}.api.riotgames.com"
    # Account endpoints (Regional)
    def account_by_riot_id(self, game_name: str, tag_line: str) -> str:
        """Get account by Riot ID endpoint."""
        base_url = self.get_base_url()
        return (
            f"{base_url}/riot/account/v1/accounts/by-riot-id/"
            f"{_segment(game_name)}/{_segment(tag_line)}"
        )

    # Match endpoints (Regional)
    def match_ids_by_puuid(self, puuid: str, start: int = 0, count: int = 20) -> str:
        """Get match id list by PUUID endpoint."""
        base_url = self.get_base_url()
        return (
            f"{base_url}/lol/match/v5/matches/by-puuid/{_segment(puuid)}/ids"
            f"?start={start}&count={count}"
        )

    def match_by_id(self, match_id: str) -> str:
        """Get match by ID endpoint."""
        return f"{self.get_base_url()}/lol/match/v5/matches/{_segment(match_id)}"

    # Summoner endpoints (Platform)
    def summoner_by_puuid(self, puuid: str) -> str:
        """Get summoner by PUUID endpoint."""
        return (
            f"{self.get_platform_url()}/lol/summoner/v4/summoners/by-puuid/"
            f"{_segment(puuid)}"
        )

    # League endpoints (Platform)
    def league_entries_by_summoner(self, summoner_id: str) -> str:
        """Get league entries by encrypted summoner ID endpoint."""
        return (
            f"{self.get_platform_url()}/lol/league/v4/entries/by-summoner/"
            f"{_segment(summoner_id)}"
        )
