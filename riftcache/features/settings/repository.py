"""Repository for persisted settings."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession

from .orm_models import SettingORM

RIOT_API_KEY = "riot_api_key"
RIOT_REGION = "riot_region"


class SettingsRepository:
    """Get and set settings by key."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[str]:
        result = await self.db.execute(
            select(SettingORM.value).where(SettingORM.key == key)
        )
        return result.scalar_one_or_none()

    async def set(self, key: str, value: str, updated_at: int) -> None:
        stmt = insert(SettingORM).values(key=key, value=value, updated_at=updated_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[SettingORM.key],
            set_={
                "value": stmt.excluded.value,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.db.execute(stmt)
