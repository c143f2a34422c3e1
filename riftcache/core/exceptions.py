"""
Cache layer custom exceptions.

Every failure the shell sees is classified by the stage that failed, so a
caller can show the message verbatim or branch on its prefix.
"""

from enum import Enum
from typing import Any, Dict, Optional

from .riot_api.errors import ResponseDecodeError, RiotAPIError, TransportError


class ErrorStage(str, Enum):
    """Stage of a cache operation that failed."""

    CONFIG = "config"
    CONNECT = "connect"
    FETCH = "fetch"
    PARSE = "parse"
    PERSIST = "persist"


class CacheServiceError(Exception):
    """Base exception for all cache layer errors."""

    stage: ErrorStage = ErrorStage.FETCH

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        if self.operation:
            return f"[{self.operation}] {self.message}"
        return self.message


class NotConfiguredError(CacheServiceError):
    """Raised before any network call when no API key has been set."""

    stage = ErrorStage.CONFIG


class PersistenceError(CacheServiceError):
    """Exception raised for store read/write failures."""

    stage = ErrorStage.PERSIST

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=f"Database error: {message}",
            operation=operation,
            context=context,
            original_error=original_error,
        )


class CachedPayloadError(CacheServiceError):
    """A stored match blob could not be decoded."""

    stage = ErrorStage.PARSE


def stage_of(error: BaseException) -> ErrorStage:
    """Classify any exception raised below the command boundary."""
    if isinstance(error, CacheServiceError):
        return error.stage
    if isinstance(error, TransportError):
        return ErrorStage.CONNECT
    if isinstance(error, ResponseDecodeError):
        return ErrorStage.PARSE
    if isinstance(error, RiotAPIError):
        return ErrorStage.FETCH
    if isinstance(error, ValueError):
        return ErrorStage.CONFIG
    return ErrorStage.FETCH


def format_failure(error: BaseException) -> str:
    """Render an exception as a stage-prefixed, human-readable message."""
    return f"{stage_of(error).value}: {error}"
