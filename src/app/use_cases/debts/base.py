"""Shared plumbing for debt ledger mutations

Every mutation runs as one unit of work:
1. Lock the customer row (serializes operations on the customer's tab)
2. Find (or create) the OPEN tab, locked
3. Append the transaction and persist the tab's new balance
4. Commit, then hand the committed events to the audit sink
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from libs.result import Error, Result, Return
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.debt_tab_repository import DebtTabRepository
from src.app.repositories.debt_transaction_repository import DebtTransactionRepository
from src.app.services.audit_service import AuditService, SYSTEM_USER
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import to_naive_utc, utcnow
from src.domain.customer import Customer
from src.domain.debt_tab import DebtTab, TabStatus
from src.domain.debt_transaction import DebtTransaction
from src.domain.errors import ConflictError, DebtLedgerError, NotFoundError, ValidationError
from src.domain.money import ZERO
from .dtos import DebtTabDTO, DebtTransactionDTO, LedgerEntryResponseDTO

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DebtLedgerUseCase:

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        tab_repo: DebtTabRepository,
        transaction_repo: DebtTransactionRepository,
        audit_service: Optional[AuditService] = None,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.tab_repo = tab_repo
        self.transaction_repo = transaction_repo
        self.audit_service = audit_service
        self._pending_audit: list[tuple[str, str, str, Dict[str, Any], str]] = []

    async def _lock_customer(self, customer_id: str) -> Customer:
        customer = await self.customer_repo.get_by_id(customer_id, for_update=True)
        if not customer:
            raise NotFoundError("Customer not found", details={"customer_id": customer_id})
        return customer

    async def _find_or_create_open_tab(self, customer_id: str) -> DebtTab:
        tab = await self.tab_repo.get_open_by_customer(customer_id, for_update=True)
        if tab:
            return tab

        tab = await self.tab_repo.create(
            DebtTab(
                customer_id=customer_id,
                status=TabStatus.OPEN,
                total_balance=ZERO,
                opened_at=utcnow(),
            )
        )
        logger.info(f"Opened debt tab {tab.id} for customer {customer_id}")
        self._queue_audit("CREATE", "DebtTab", tab.id, {"customerId": customer_id}, SYSTEM_USER)
        return tab

    async def _require_open_tab(self, customer_id: str) -> DebtTab:
        tab = await self.tab_repo.get_open_by_customer(customer_id, for_update=True)
        if not tab:
            raise NotFoundError(
                "No open debt tab for customer",
                details={"customer_id": customer_id},
            )
        return tab

    @staticmethod
    def _require_actor(entered_by_id: str) -> str:
        actor = (entered_by_id or "").strip()
        if not actor:
            raise ValidationError("Acting user is required")
        return actor

    @staticmethod
    def _business_date(value: datetime) -> datetime:
        return to_naive_utc(value)

    def _queue_audit(
        self,
        action: str,
        entity: str,
        entity_id: str,
        changes: Dict[str, Any],
        user_id: str,
    ) -> None:
        self._pending_audit.append((action, entity, entity_id, changes, user_id))

    async def _flush_audit(self) -> None:
        """Send queued events to the audit sink; called only after commit"""
        pending, self._pending_audit = self._pending_audit, []
        if not self.audit_service:
            return
        for action, entity, entity_id, changes, user_id in pending:
            try:
                await self.audit_service.record(action, entity, entity_id, changes, user_id)
            except Exception as e:
                logger.error(f"Audit record failed for {entity} {entity_id}: {e}")

    async def _retry_on_conflict(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run one unit of work, retrying it once when a concurrent operation
        opened the customer's tab first.

        The retry starts from a rolled back session, so it re-reads the tab
        the other operation committed. A second conflict propagates.
        """
        try:
            return await operation()
        except ConflictError as e:
            logger.info(f"Retrying after conflict: {e.message} ({self._format_reason(e.details)})")
            self._pending_audit = []
            await self.uow.rollback()
            return await operation()

    async def _commit(self) -> None:
        await self.uow.commit()
        await self._flush_audit()

    async def _fail(self, error: DebtLedgerError) -> Result[Any]:
        self._pending_audit = []
        await self.uow.rollback()
        return Return.err(
            Error(
                code=error.code,
                message=error.message,
                reason=self._format_reason(error.details),
                details=error.details,
            )
        )

    async def _crash(self, code: str, message: str, exc: Exception) -> Result[Any]:
        self._pending_audit = []
        await self.uow.rollback()
        return Return.err(Error(code=code, message=message, reason=str(exc)))

    @staticmethod
    def _format_reason(details: Dict[str, Any]) -> Optional[str]:
        if not details:
            return None
        return ", ".join(f"{key}={value}" for key, value in details.items())

    @staticmethod
    def _to_response_dto(
        tab: DebtTab, transaction: Optional[DebtTransaction]
    ) -> LedgerEntryResponseDTO:
        return LedgerEntryResponseDTO(
            transaction=DebtTransactionDTO.model_validate(transaction) if transaction else None,
            tab=DebtTabDTO.model_validate(tab),
        )

    @staticmethod
    def _transaction_changes(transaction: DebtTransaction, customer_id: str) -> Dict[str, Any]:
        changes: Dict[str, Any] = {
            "type": transaction.transaction_type.value,
            "customerId": customer_id,
            "amount": str(transaction.amount),
            "balanceAfter": str(transaction.balance_after),
            "transactionDate": transaction.transaction_date.isoformat(),
            "notes": transaction.notes,
        }
        if transaction.containers is not None:
            changes["containers"] = str(transaction.containers)
            changes["unitPrice"] = str(transaction.unit_price)
        if transaction.adjustment_reason is not None:
            changes["reason"] = transaction.adjustment_reason
        return changes

    def _queue_tab_closed(self, tab: DebtTab, user_id: str) -> None:
        self._queue_audit(
            "UPDATE",
            "DebtTab",
            tab.id,
            {
                "status": TabStatus.CLOSED.value,
                "closedAt": tab.closed_at.isoformat() if tab.closed_at else None,
            },
            user_id,
        )
