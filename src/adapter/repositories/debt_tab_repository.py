"""SQLAlchemy implementation of DebtTabRepository

Provides persistence for DebtTab entities with pessimistic locking support
so that concurrent operations on one customer's tab cannot lose updates.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.exc import IntegrityError
from src.app.repositories.debt_tab_repository import DebtTabRepository
from src.domain.base import utcnow
from src.domain.customer import Customer
from src.domain.debt_tab import DebtTab, TabStatus
from src.domain.errors import ConflictError, NotFoundError, ValidationError
from src.domain.money import ZERO, is_zero, to_money


class SqlAlchemyDebtTabRepository(DebtTabRepository):
    """
    SQLAlchemy implementation of DebtTabRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Open-tab uniqueness enforced by a partial unique index
    - Closed tabs are refused on update
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_open_by_customer(self, customer_id: str, for_update: bool = False) -> Optional[DebtTab]:
        """
        Retrieve the customer's OPEN tab with optional row-level locking

        Args:
            customer_id: Customer identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            DebtTab if the customer has an open tab, None otherwise
        """
        stmt = select(DebtTab).where(
            DebtTab.customer_id == customer_id,
            DebtTab.status == TabStatus.OPEN,
        )

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, tab_id: str, for_update: bool = False) -> Optional[DebtTab]:
        stmt = select(DebtTab).where(DebtTab.id == tab_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, tab: DebtTab) -> DebtTab:
        """
        Create a new debt tab

        Raises:
            ConflictError: The customer already has an OPEN tab
        """
        self.session.add(tab)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(
                "Customer already has an open debt tab",
                details={"customer_id": tab.customer_id},
            ) from e
        await self.session.refresh(tab)
        return tab

    async def apply_balance(
        self,
        tab_id: str,
        new_balance: Decimal,
        close_if_zero: bool = False,
        closed_at: Optional[datetime] = None,
    ) -> DebtTab:
        """
        Update tab balance, closing it when requested and the balance is zero

        Note:
            Should be called within a transaction with the tab already locked
        """
        tab = await self.get_by_id(tab_id)
        if not tab:
            raise NotFoundError("Debt tab not found", details={"tab_id": tab_id})
        if tab.status == TabStatus.CLOSED:
            raise ValidationError("Closed debt tabs cannot be modified", details={"tab_id": tab_id})

        tab.total_balance = to_money(new_balance)
        tab.updated_at = utcnow()

        if close_if_zero and is_zero(new_balance):
            tab.status = TabStatus.CLOSED
            tab.total_balance = ZERO
            tab.closed_at = closed_at or utcnow()

        self.session.add(tab)
        await self.session.flush()
        return tab

    async def list_by_customer(self, customer_id: str) -> list[DebtTab]:
        stmt = (
            select(DebtTab)
            .where(DebtTab.customer_id == customer_id)
            .order_by(DebtTab.opened_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_open_with_customers(self) -> list[tuple[DebtTab, str]]:
        stmt = (
            select(DebtTab, Customer.name)
            .join(Customer, Customer.id == DebtTab.customer_id)
            .where(DebtTab.status == TabStatus.OPEN)
            .order_by(DebtTab.updated_at.desc())
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def get_all(self) -> list[DebtTab]:
        stmt = select(DebtTab).order_by(DebtTab.opened_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
