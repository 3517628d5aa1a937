"""ReconcileDebtTabs Use Case

Replays every tab's transaction log from zero and compares the result with
the stored balance snapshots.
"""

import logging
import time
from decimal import Decimal
from typing import Optional

from libs.result import Result, Return, Error
from src.app.repositories.debt_tab_repository import DebtTabRepository
from src.app.repositories.debt_transaction_repository import DebtTransactionRepository
from src.domain.base import utcnow
from src.domain.debt_tab import DebtTab, TabStatus
from src.domain.debt_transaction import DebtTransaction
from src.domain.money import ZERO, to_money
from .dtos import DebtReconciliationResultDTO, TabDiscrepancyDTO

logger = logging.getLogger(__name__)

ISSUE_BALANCE_AFTER = "balance_after_mismatch"
ISSUE_TAB_BALANCE = "tab_balance_mismatch"
ISSUE_CLOSED_WITH_BALANCE = "closed_with_balance"


def replay_transaction(balance: Decimal, transaction: DebtTransaction) -> Decimal:
    """Balance after applying one entry the way the ledger engine does"""
    return max(ZERO, to_money(balance + transaction.signed_amount))


class ReconcileDebtTabs:
    """
    Use Case: Reconcile debt tabs against their transaction logs

    Business Rules:
    1. Replays each tab's entries in the order they were appended
    2. Every balance_after must equal the replayed balance
    3. total_balance must equal the replayed balance after the last entry
    4. A CLOSED tab must have a zero balance
    5. Read-only: nothing is modified
    """

    def __init__(
        self,
        tab_repo: DebtTabRepository,
        transaction_repo: DebtTransactionRepository,
    ):
        self.tab_repo = tab_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[DebtReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = utcnow()

        try:
            logger.info("Starting debt tab reconciliation")

            tabs = await self.tab_repo.get_all()
            logger.info(f"Found {len(tabs)} debt tabs to reconcile")

            discrepancies: list[TabDiscrepancyDTO] = []
            for tab in tabs:
                transactions = await self.transaction_repo.list_for_tab(tab.id, newest_first=False)
                discrepancies.extend(self._check_tab(tab, transactions))

            execution_time_ms = int((time.time() - start_time) * 1000)

            for d in discrepancies:
                logger.warning(
                    f"Discrepancy on tab {d.tab_id} (customer {d.customer_id}): {d.issue}, "
                    f"tab_balance={d.tab_balance}, replayed_balance={d.replayed_balance}"
                )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {len(tabs)} tabs in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(tabs)} tabs balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                DebtReconciliationResultDTO(
                    total_tabs_checked=len(tabs),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Debt tab reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile debt tabs",
                    reason=str(e),
                )
            )

    def _check_tab(
        self, tab: DebtTab, transactions: list[DebtTransaction]
    ) -> list[TabDiscrepancyDTO]:
        found: list[TabDiscrepancyDTO] = []
        balance = ZERO
        first_mismatch: Optional[DebtTransaction] = None

        # balance_after chains in append order, not business date order
        for transaction in sorted(transactions, key=lambda t: t.created_at):
            balance = replay_transaction(balance, transaction)
            if first_mismatch is None and to_money(transaction.balance_after) != balance:
                first_mismatch = transaction

        if first_mismatch is not None:
            found.append(self._discrepancy(tab, balance, ISSUE_BALANCE_AFTER, first_mismatch.id))

        if to_money(tab.total_balance) != balance:
            found.append(self._discrepancy(tab, balance, ISSUE_TAB_BALANCE))

        if tab.status == TabStatus.CLOSED and to_money(tab.total_balance) != ZERO:
            found.append(self._discrepancy(tab, balance, ISSUE_CLOSED_WITH_BALANCE))

        return found

    @staticmethod
    def _discrepancy(
        tab: DebtTab, replayed: Decimal, issue: str, transaction_id: Optional[str] = None
    ) -> TabDiscrepancyDTO:
        return TabDiscrepancyDTO(
            tab_id=tab.id,
            customer_id=tab.customer_id,
            status=tab.status,
            tab_balance=tab.total_balance,
            replayed_balance=replayed,
            issue=issue,
            transaction_id=transaction_id,
        )
