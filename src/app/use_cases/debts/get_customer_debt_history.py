"""Get Customer Debt History Use Case

Every tab a customer ever had (open and closed) plus every transaction
across them.
"""

from libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.debt_tab_repository import DebtTabRepository
from src.app.repositories.debt_transaction_repository import DebtTransactionRepository
from .dtos import CustomerDebtHistoryDTO, DebtTabDTO, DebtTransactionDTO


class GetCustomerDebtHistory:

    def __init__(
        self,
        customer_repo: CustomerRepository,
        tab_repo: DebtTabRepository,
        transaction_repo: DebtTransactionRepository,
    ):
        self.customer_repo = customer_repo
        self.tab_repo = tab_repo
        self.transaction_repo = transaction_repo

    async def execute(self, customer_id: str) -> Result[CustomerDebtHistoryDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            return Return.err(
                Error(
                    code="NOT_FOUND",
                    message="Customer not found",
                    details={"customer_id": customer_id},
                )
            )

        tabs = await self.tab_repo.list_by_customer(customer_id)
        transactions = await self.transaction_repo.list_for_customer(customer_id) if tabs else []

        return Return.ok(
            CustomerDebtHistoryDTO(
                tabs=[DebtTabDTO.model_validate(t) for t in tabs],
                transactions=[DebtTransactionDTO.model_validate(t) for t in transactions],
            )
        )
