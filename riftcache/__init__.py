"""riftcache: a local, cache-first data-access layer for the Riot Games API."""

from .commands import CacheCommands, CommandResult
from .orchestrator import CacheOrchestrator
from .store import CacheStore

__version__ = "0.1.0"

__all__ = ["CacheCommands", "CommandResult", "CacheOrchestrator", "CacheStore"]
