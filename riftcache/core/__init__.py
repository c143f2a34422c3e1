"""Core infrastructure module.

This module exports core utilities used across features.
Never imports from features - only from external libraries.
"""

from .config import (
    ClientConfig,
    RuntimeConfig,
    Settings,
    get_global_settings,
    get_settings,
)
from .exceptions import (
    CachedPayloadError,
    CacheServiceError,
    ErrorStage,
    NotConfiguredError,
    PersistenceError,
    format_failure,
    stage_of,
)
from .logging import setup_logging
from .models import Base, epoch_seconds

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_global_settings",
    "ClientConfig",
    "RuntimeConfig",
    # Exceptions
    "ErrorStage",
    "CacheServiceError",
    "NotConfiguredError",
    "PersistenceError",
    "CachedPayloadError",
    "stage_of",
    "format_failure",
    # Logging
    "setup_logging",
    # Models
    "Base",
    "epoch_seconds",
]
