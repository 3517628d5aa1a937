import logging
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commits or rolls back every row a ledger operation flushed through one session"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        if not self.session.in_transaction():
            return
        logger.debug("Rolling back ledger unit of work")
        await self.session.rollback()
