"""RecordCharge Use Case

Records containers sold on credit: the customer's open tab grows by
containers * unit price. Opens a new tab when the customer has none.
"""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from libs.result import Result, Return
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.debt_tab_repository import DebtTabRepository
from src.app.repositories.debt_transaction_repository import DebtTransactionRepository
from src.app.services.audit_service import AuditService
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.unit_price_resolver import UnitPriceResolver
from src.domain.debt_transaction import DebtTransaction, DebtTransactionType
from src.domain.errors import DebtLedgerError, ValidationError
from src.domain.money import to_money
from .base import DebtLedgerUseCase
from .dtos import LedgerEntryResponseDTO, RecordChargeCommandDTO

logger = logging.getLogger(__name__)

# Largest value a Numeric(18, 3) column holds
MAX_CONTAINERS = Decimal("999999999999999.999")


class RecordCharge(DebtLedgerUseCase):
    """
    Use Case: Charge containers to a customer's tab

    Business Rules:
    1. containers > 0
    2. Customer must exist and be active
    3. Unit price: customer override if > 0, else the global setting
    4. Find-or-create the OPEN tab; a charge never closes a tab

    Flow:
    1. Validate containers and actor
    2. Lock customer row, check it is active
    3. Resolve unit price, amount = containers * unit_price
    4. Find or create OPEN tab (locked); if a concurrent charge opened it
       first, roll back and run steps 2-7 once more
    5. Append CHARGE transaction with balance_after
    6. Persist tab balance
    7. Commit, then audit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        tab_repo: DebtTabRepository,
        transaction_repo: DebtTransactionRepository,
        price_resolver: UnitPriceResolver,
        audit_service: Optional[AuditService] = None,
    ):
        super().__init__(uow, customer_repo, tab_repo, transaction_repo, audit_service)
        self.price_resolver = price_resolver

    async def execute(self, command: RecordChargeCommandDTO) -> Result[LedgerEntryResponseDTO]:
        try:
            # Step 1: Validate input
            containers = self._parse_containers(command.containers)
            actor = self._require_actor(command.entered_by_id)
            transaction_date = self._business_date(command.transaction_date)

            # Steps 2-7 run as one unit, retried once if a concurrent charge opened the tab
            response = await self._retry_on_conflict(
                lambda: self._charge(command, containers, actor, transaction_date)
            )

            logger.info(f"Debt charge recorded for customer {command.customer_id} by {actor}")
            return Return.ok(response)

        except DebtLedgerError as e:
            logger.warning(f"Charge rejected for customer {command.customer_id}: {e.message}")
            return await self._fail(e)

        except Exception as e:
            logger.exception(f"Charge failed for customer {command.customer_id}")
            return await self._crash("RECORD_CHARGE_FAILED", "Failed to record charge", e)

    async def _charge(
        self,
        command: RecordChargeCommandDTO,
        containers: Decimal,
        actor: str,
        transaction_date: datetime,
    ) -> LedgerEntryResponseDTO:
        # Step 2: Lock customer; inactive customers cannot take on debt
        customer = await self._lock_customer(command.customer_id)
        if not customer.active:
            raise ValidationError(
                "Cannot record debt for inactive customer",
                details={"customer_id": customer.id},
            )

        # Step 3: Price the charge
        unit_price = await self.price_resolver.price_for(customer)
        amount = to_money(containers * unit_price)

        # Step 4: Find or create the open tab
        tab = await self._find_or_create_open_tab(customer.id)
        new_balance = to_money(tab.total_balance + amount)

        # Step 5: Append the ledger entry
        transaction = await self.transaction_repo.append(
            DebtTransaction(
                debt_tab_id=tab.id,
                transaction_type=DebtTransactionType.CHARGE,
                containers=containers,
                unit_price=unit_price,
                amount=amount,
                balance_after=new_balance,
                notes=command.notes,
                transaction_date=transaction_date,
                entered_by_id=actor,
            )
        )

        # Step 6: Persist balance
        tab = await self.tab_repo.apply_balance(tab.id, new_balance)

        # Step 7: Commit and audit
        self._queue_audit(
            "CREATE",
            "DebtTransaction",
            transaction.id,
            self._transaction_changes(transaction, customer.id),
            actor,
        )
        response = self._to_response_dto(tab, transaction)
        await self._commit()
        return response

    @staticmethod
    def _parse_containers(value) -> Decimal:
        try:
            containers = Decimal(str(value))
        except (InvalidOperation, TypeError):
            raise ValidationError("Containers must be a number", details={"containers": value})
        if not containers.is_finite() or containers <= 0:
            raise ValidationError(
                "Containers must be greater than 0",
                details={"containers": str(containers)},
            )
        if containers > MAX_CONTAINERS:
            raise ValidationError(
                "Containers is out of range",
                details={"containers": str(containers)},
            )
        return containers
