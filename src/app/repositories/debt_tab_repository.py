"""Debt Tab Repository Interface

Defines the contract for debt tab persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional
from src.domain.debt_tab import DebtTab


class DebtTabRepository(ABC):
    """
    Repository interface for DebtTab persistence

    At most one OPEN tab exists per customer. Callers mutate a tab only
    after reading it with ``for_update=True`` inside their unit of work.
    """

    @abstractmethod
    async def get_open_by_customer(self, customer_id: str, for_update: bool = False) -> Optional[DebtTab]:
        """
        Retrieve the customer's OPEN tab

        Args:
            customer_id: Customer identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            The open DebtTab, or None if the customer has none
        """
        pass

    @abstractmethod
    async def get_by_id(self, tab_id: str, for_update: bool = False) -> Optional[DebtTab]:
        pass

    @abstractmethod
    async def create(self, tab: DebtTab) -> DebtTab:
        """
        Persist a new tab

        Raises:
            IntegrityError: If the customer already has an OPEN tab
        """
        pass

    @abstractmethod
    async def apply_balance(
        self,
        tab_id: str,
        new_balance: Decimal,
        close_if_zero: bool = False,
        closed_at: Optional[datetime] = None,
    ) -> DebtTab:
        """
        Persist a tab's new balance

        Args:
            tab_id: Tab ID
            new_balance: Balance after the latest transaction
            close_if_zero: Close the tab when new_balance is zero
            closed_at: Closure timestamp (defaults to now)

        Returns:
            The updated DebtTab

        Note:
            Should be called within a transaction with the tab already locked
        """
        pass

    @abstractmethod
    async def list_by_customer(self, customer_id: str) -> list[DebtTab]:
        """All tabs of a customer, most recently opened first"""
        pass

    @abstractmethod
    async def list_open_with_customers(self) -> list[tuple[DebtTab, str]]:
        """Every OPEN tab paired with its customer's name, most recently updated first"""
        pass

    @abstractmethod
    async def get_all(self) -> list[DebtTab]:
        pass
