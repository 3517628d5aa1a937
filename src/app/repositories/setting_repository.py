"""Setting Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional


class SettingRepository(ABC):

    @abstractmethod
    async def get_value(self, key: str) -> Optional[str]:
        """Raw value for ``key``, or None if the setting does not exist"""
        pass
