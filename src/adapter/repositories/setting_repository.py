"""SQLAlchemy implementation of SettingRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.setting_repository import SettingRepository
from src.domain.setting import Setting


class SqlAlchemySettingRepository(SettingRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_value(self, key: str) -> Optional[str]:
        stmt = select(Setting.value).where(Setting.key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
