"""Declarative base and shared column helpers for the cache tables."""

import time

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def epoch_seconds() -> int:
    """Current time as whole Unix-epoch seconds (UTC)."""
    return int(time.time())
