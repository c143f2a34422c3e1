"""
Riot API client package for League of Legends API integration.

This package provides the HTTP client for the Riot API, including request
pacing, bounded backoff on throttling and typed error mapping.
"""

from .client import RiotAPIClient
from .constants import Platform, Region, parse_platform, regional_route
from .endpoints import RiotAPIEndpoints
from .errors import (
    AuthenticationError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
    RiotAPIError,
    ServiceUnavailableError,
    TransportError,
)
from .models import (
    AccountDTO,
    LeagueEntryDTO,
    MatchDTO,
    ParticipantDTO,
    SummonerDTO,
)
from .rate_limiter import RateLimiter

__all__ = [
    "RiotAPIClient",
    "RateLimiter",
    "RiotAPIEndpoints",
    "Platform",
    "Region",
    "parse_platform",
    "regional_route",
    "RiotAPIError",
    "RateLimitError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "BadRequestError",
    "ServiceUnavailableError",
    "TransportError",
    "ResponseDecodeError",
    "AccountDTO",
    "SummonerDTO",
    "MatchDTO",
    "ParticipantDTO",
    "LeagueEntryDTO",
]
