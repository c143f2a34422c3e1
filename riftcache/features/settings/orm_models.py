"""Key-value settings table for runtime configuration."""

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from riftcache.core.models import Base


class SettingORM(Base):
    """One persisted setting."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(
        String(128), primary_key=True, comment="Setting key (e.g., 'riot_api_key')"
    )
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        """Return string representation of the setting."""
        # Always mask values in __repr__ to prevent accidental exposure in logs
        return f"<SettingORM(key='{self.key}', value='***')>"
