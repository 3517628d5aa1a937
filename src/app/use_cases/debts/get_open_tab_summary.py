"""Get Open Tab Summary Use Case

Every customer currently carrying an open tab, most recently updated first.
"""

from libs.result import Result, Return
from src.app.repositories.debt_tab_repository import DebtTabRepository
from .dtos import OpenTabSummaryDTO


class GetOpenTabSummary:

    def __init__(self, tab_repo: DebtTabRepository):
        self.tab_repo = tab_repo

    async def execute(self) -> Result[list[OpenTabSummaryDTO]]:
        rows = await self.tab_repo.list_open_with_customers()
        return Return.ok(
            [
                OpenTabSummaryDTO(
                    tab_id=tab.id,
                    customer_id=tab.customer_id,
                    customer_name=customer_name,
                    balance=tab.total_balance,
                    status=tab.status,
                    opened_at=tab.opened_at,
                    last_updated=tab.updated_at,
                )
                for tab, customer_name in rows
            ]
        )
