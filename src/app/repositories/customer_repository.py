"""Customer Repository Interface

Read-only access to customers for the debt ledger.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.customer import Customer


class CustomerRepository(ABC):

    @abstractmethod
    async def get_by_id(self, customer_id: str, for_update: bool = False) -> Optional[Customer]:
        """
        Retrieve customer by ID

        Args:
            customer_id: Customer identifier
            for_update: If True, lock the row with SELECT FOR UPDATE. Ledger
                mutations lock the customer first so that operations on the
                same customer's tab run one at a time.

        Returns:
            Customer if found, None otherwise
        """
        pass
