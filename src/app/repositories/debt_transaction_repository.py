"""Debt Transaction Repository Interface

Transactions are immutable and append-only: there is no update or delete.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from src.domain.customer import Customer
from src.domain.debt_tab import DebtTab, TabStatus
from src.domain.debt_transaction import DebtTransaction, DebtTransactionType


@dataclass
class TransactionFilter:
    """Criteria for the global transaction listing"""
    customer_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    transaction_type: Optional[DebtTransactionType] = None
    tab_status: Optional[TabStatus] = None  # None means all statuses
    limit: int = 50
    offset: int = 0


class DebtTransactionRepository(ABC):

    @abstractmethod
    async def append(self, transaction: DebtTransaction) -> DebtTransaction:
        """
        Persist one immutable transaction row

        Args:
            transaction: DebtTransaction with balance_after already computed

        Returns:
            Created DebtTransaction
        """
        pass

    @abstractmethod
    async def list_for_tab(self, tab_id: str, newest_first: bool = True) -> list[DebtTransaction]:
        """Transactions of one tab ordered by transaction_date, then created_at"""
        pass

    @abstractmethod
    async def list_for_customer(self, customer_id: str) -> list[DebtTransaction]:
        """Transactions across all of a customer's tabs, newest first"""
        pass

    @abstractmethod
    async def list_filtered(
        self, criteria: TransactionFilter
    ) -> tuple[list[tuple[DebtTransaction, DebtTab, Customer]], int]:
        """
        Paginated transactions joined with their tab and customer

        Returns:
            Tuple of (rows for the requested page, total matching count)
        """
        pass
