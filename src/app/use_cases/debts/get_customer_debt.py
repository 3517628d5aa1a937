"""Get Customer Debt Use Case

Current debt snapshot for one customer: the open tab (if any) and its
transactions, newest first.
"""

from libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.debt_tab_repository import DebtTabRepository
from src.app.repositories.debt_transaction_repository import DebtTransactionRepository
from .dtos import CustomerDebtSnapshotDTO, CustomerDTO, DebtTabDTO, DebtTransactionDTO


class GetCustomerDebt:

    def __init__(
        self,
        customer_repo: CustomerRepository,
        tab_repo: DebtTabRepository,
        transaction_repo: DebtTransactionRepository,
    ):
        self.customer_repo = customer_repo
        self.tab_repo = tab_repo
        self.transaction_repo = transaction_repo

    async def execute(self, customer_id: str) -> Result[CustomerDebtSnapshotDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            return Return.err(
                Error(
                    code="NOT_FOUND",
                    message="Customer not found",
                    details={"customer_id": customer_id},
                )
            )

        tab = await self.tab_repo.get_open_by_customer(customer_id)
        transactions = await self.transaction_repo.list_for_tab(tab.id) if tab else []

        return Return.ok(
            CustomerDebtSnapshotDTO(
                customer=CustomerDTO.model_validate(customer),
                tab=DebtTabDTO.model_validate(tab) if tab else None,
                transactions=[DebtTransactionDTO.model_validate(t) for t in transactions],
            )
        )
