"""RecordAdjustment Use Case

Manual correction of an open tab's balance with a stated reason.
"""

import logging

from libs.result import Result, Return
from src.domain.debt_transaction import DebtTransaction, DebtTransactionType
from src.domain.errors import DebtLedgerError, ValidationError
from src.domain.money import ZERO, round_cents, to_money
from .base import DebtLedgerUseCase
from .dtos import LedgerEntryResponseDTO, RecordAdjustmentCommandDTO

logger = logging.getLogger(__name__)


class RecordAdjustment(DebtLedgerUseCase):
    """
    Use Case: Adjust a customer's open tab

    Business Rules:
    1. reason is required and not blank
    2. amount != 0 (negative = credit, positive = correction upwards)
    3. An OPEN tab must exist
    4. The resulting balance may not be negative
    5. Adjustments never close the tab, even when the balance reaches zero;
       closing is left to payments and mark-paid
    """

    async def execute(self, command: RecordAdjustmentCommandDTO) -> Result[LedgerEntryResponseDTO]:
        try:
            reason = (command.reason or "").strip()
            if not reason:
                raise ValidationError("Adjustment reason is required")
            amount = round_cents(command.amount)
            if amount == ZERO:
                raise ValidationError("Adjustment amount cannot be zero")
            actor = self._require_actor(command.entered_by_id)
            transaction_date = self._business_date(command.transaction_date)

            await self._lock_customer(command.customer_id)
            tab = await self._require_open_tab(command.customer_id)

            new_balance = round_cents(tab.total_balance + amount)
            if new_balance < ZERO:
                raise ValidationError(
                    "Adjustment would result in negative balance",
                    details={"balance": str(tab.total_balance), "adjustment": str(amount)},
                )
            new_balance = to_money(new_balance)

            transaction = await self.transaction_repo.append(
                DebtTransaction(
                    debt_tab_id=tab.id,
                    transaction_type=DebtTransactionType.ADJUSTMENT,
                    amount=amount,
                    balance_after=new_balance,
                    adjustment_reason=reason,
                    notes=command.notes,
                    transaction_date=transaction_date,
                    entered_by_id=actor,
                )
            )

            tab = await self.tab_repo.apply_balance(tab.id, new_balance, close_if_zero=False)

            self._queue_audit(
                "CREATE",
                "DebtTransaction",
                transaction.id,
                self._transaction_changes(transaction, command.customer_id),
                actor,
            )
            response = self._to_response_dto(tab, transaction)
            await self._commit()

            logger.info(f"Debt adjustment recorded for customer {command.customer_id} by {actor}")
            return Return.ok(response)

        except DebtLedgerError as e:
            logger.warning(f"Adjustment rejected for customer {command.customer_id}: {e.message}")
            return await self._fail(e)

        except Exception as e:
            logger.exception(f"Adjustment failed for customer {command.customer_id}")
            return await self._crash("RECORD_ADJUSTMENT_FAILED", "Failed to record adjustment", e)
