"""
List Debt Transactions Use Case

Global, filtered and paginated transaction history joined with each
transaction's tab and customer.
"""
import math

from libs.result import Result, Return, Error
from src.app.repositories.debt_transaction_repository import (
    DebtTransactionRepository,
    TransactionFilter,
)
from src.domain.base import to_naive_utc
from src.domain.debt_tab import TabStatus
from .dtos import (
    DebtHistoryItemDTO,
    DebtHistoryPageDTO,
    DebtHistoryQueryDTO,
    DebtTransactionDTO,
)

STATUS_ALL = "ALL"


class ListDebtTransactions:
    """
    Use case: Global debt transaction history

    Filters: customer, inclusive date range, transaction type and tab
    status (OPEN, CLOSED or ALL). Ordered by transaction_date DESC.
    """

    def __init__(self, transaction_repo: DebtTransactionRepository, max_limit: int = 200):
        self.transaction_repo = transaction_repo
        self.max_limit = max_limit

    async def execute(self, query: DebtHistoryQueryDTO) -> Result[DebtHistoryPageDTO]:
        if query.page < 1:
            return Return.err(Error(code="VALIDATION_ERROR", message="page must be >= 1"))
        if query.limit < 1 or query.limit > self.max_limit:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message=f"limit must be between 1 and {self.max_limit}",
                )
            )

        tab_status = None
        if query.status and query.status.upper() != STATUS_ALL:
            try:
                tab_status = TabStatus(query.status.upper())
            except ValueError:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="status must be OPEN, CLOSED or ALL",
                        details={"status": query.status},
                    )
                )

        criteria = TransactionFilter(
            customer_id=query.customer_id,
            start_date=to_naive_utc(query.start_date) if query.start_date else None,
            end_date=to_naive_utc(query.end_date) if query.end_date else None,
            transaction_type=query.transaction_type,
            tab_status=tab_status,
            limit=query.limit,
            offset=(query.page - 1) * query.limit,
        )

        rows, total = await self.transaction_repo.list_filtered(criteria)

        items = [
            DebtHistoryItemDTO(
                **DebtTransactionDTO.model_validate(transaction).model_dump(),
                customer_id=customer.id,
                customer_name=customer.name,
                tab_status=tab.status,
            )
            for transaction, tab, customer in rows
        ]

        return Return.ok(
            DebtHistoryPageDTO(
                transactions=items,
                page=query.page,
                limit=query.limit,
                total=total,
                total_pages=math.ceil(total / query.limit) if total else 0,
            )
        )
