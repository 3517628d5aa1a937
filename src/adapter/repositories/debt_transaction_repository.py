"""SQLAlchemy implementation of DebtTransactionRepository

Append-only: rows are inserted and read, never updated or deleted.
"""

from sqlmodel import select, func, and_
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.debt_transaction_repository import (
    DebtTransactionRepository,
    TransactionFilter,
)
from src.domain.customer import Customer
from src.domain.debt_tab import DebtTab
from src.domain.debt_transaction import DebtTransaction


class SqlAlchemyDebtTransactionRepository(DebtTransactionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, transaction: DebtTransaction) -> DebtTransaction:
        """
        Insert one transaction row

        Args:
            transaction: DebtTransaction entity to persist

        Returns:
            Created DebtTransaction
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def list_for_tab(self, tab_id: str, newest_first: bool = True) -> list[DebtTransaction]:
        if newest_first:
            ordering = (DebtTransaction.transaction_date.desc(), DebtTransaction.created_at.desc())
        else:
            ordering = (DebtTransaction.transaction_date, DebtTransaction.created_at)

        stmt = (
            select(DebtTransaction)
            .where(DebtTransaction.debt_tab_id == tab_id)
            .order_by(*ordering)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_customer(self, customer_id: str) -> list[DebtTransaction]:
        stmt = (
            select(DebtTransaction)
            .join(DebtTab, DebtTab.id == DebtTransaction.debt_tab_id)
            .where(DebtTab.customer_id == customer_id)
            .order_by(DebtTransaction.transaction_date.desc(), DebtTransaction.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_filtered(
        self, criteria: TransactionFilter
    ) -> tuple[list[tuple[DebtTransaction, DebtTab, Customer]], int]:
        """
        Retrieve transactions matching the criteria with pagination

        Returns:
            Tuple of (list of (transaction, tab, customer), total count)
        """
        conditions = []
        if criteria.customer_id:
            conditions.append(DebtTab.customer_id == criteria.customer_id)
        if criteria.transaction_type:
            conditions.append(DebtTransaction.transaction_type == criteria.transaction_type)
        if criteria.start_date:
            conditions.append(DebtTransaction.transaction_date >= criteria.start_date)
        if criteria.end_date:
            conditions.append(DebtTransaction.transaction_date <= criteria.end_date)
        if criteria.tab_status:
            conditions.append(DebtTab.status == criteria.tab_status)

        where_clause = and_(True, *conditions)

        # Get total count
        count_stmt = (
            select(func.count())
            .select_from(DebtTransaction)
            .join(DebtTab, DebtTab.id == DebtTransaction.debt_tab_id)
            .where(where_clause)
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        # Get requested page ordered by transaction_date DESC
        stmt = (
            select(DebtTransaction, DebtTab, Customer)
            .join(DebtTab, DebtTab.id == DebtTransaction.debt_tab_id)
            .join(Customer, Customer.id == DebtTab.customer_id)
            .where(where_clause)
            .order_by(DebtTransaction.transaction_date.desc(), DebtTransaction.created_at.desc())
            .limit(criteria.limit)
            .offset(criteria.offset)
        )
        result = await self.session.execute(stmt)
        rows = [(row[0], row[1], row[2]) for row in result.all()]

        return rows, total
