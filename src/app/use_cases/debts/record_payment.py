"""RecordPayment Use Case

Records a payment against the customer's open tab. Paying the exact
balance closes the tab.
"""

import logging

from libs.result import Result, Return
from src.domain.debt_transaction import DebtTransaction, DebtTransactionType
from src.domain.errors import DebtLedgerError, ValidationError
from src.domain.money import ZERO, round_cents, to_money
from .base import DebtLedgerUseCase
from .dtos import LedgerEntryResponseDTO, RecordPaymentCommandDTO

logger = logging.getLogger(__name__)


class RecordPayment(DebtLedgerUseCase):
    """
    Use Case: Pay down a customer's open tab

    Business Rules:
    1. amount > 0
    2. An OPEN tab must exist (cannot pay a non-existent debt)
    3. amount may not exceed the current balance (no overpayment)
    4. A payment that brings the balance to zero closes the tab
       (closed_at = transaction_date)
    """

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[LedgerEntryResponseDTO]:
        try:
            amount = round_cents(command.amount)
            if amount <= ZERO:
                raise ValidationError(
                    "Payment amount must be greater than 0",
                    details={"amount": str(amount)},
                )
            actor = self._require_actor(command.entered_by_id)
            transaction_date = self._business_date(command.transaction_date)

            await self._lock_customer(command.customer_id)
            tab = await self._require_open_tab(command.customer_id)

            if amount > tab.total_balance:
                raise ValidationError(
                    "Overpayment not allowed",
                    details={"balance": str(tab.total_balance), "requested": str(amount)},
                )

            new_balance = max(ZERO, to_money(tab.total_balance - amount))

            transaction = await self.transaction_repo.append(
                DebtTransaction(
                    debt_tab_id=tab.id,
                    transaction_type=DebtTransactionType.PAYMENT,
                    amount=amount,
                    balance_after=new_balance,
                    notes=command.notes,
                    transaction_date=transaction_date,
                    entered_by_id=actor,
                )
            )

            tab = await self.tab_repo.apply_balance(
                tab.id, new_balance, close_if_zero=True, closed_at=transaction_date
            )

            self._queue_audit(
                "CREATE",
                "DebtTransaction",
                transaction.id,
                self._transaction_changes(transaction, command.customer_id),
                actor,
            )
            closed = not tab.is_open
            if closed:
                self._queue_tab_closed(tab, actor)
            response = self._to_response_dto(tab, transaction)
            await self._commit()

            logger.info(f"Debt payment recorded for customer {command.customer_id} by {actor}")
            if closed:
                logger.info(f"Debt tab {response.tab.id} closed for customer {command.customer_id}")
            return Return.ok(response)

        except DebtLedgerError as e:
            logger.warning(f"Payment rejected for customer {command.customer_id}: {e.message}")
            return await self._fail(e)

        except Exception as e:
            logger.exception(f"Payment failed for customer {command.customer_id}")
            return await self._crash("RECORD_PAYMENT_FAILED", "Failed to record payment", e)
