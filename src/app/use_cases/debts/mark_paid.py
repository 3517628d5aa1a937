"""MarkPaid Use Case

Administrative closure of a customer's open tab, optionally preceded by
one final payment.
"""

import logging
from typing import Optional

from libs.result import Result, Return
from src.domain.debt_transaction import DebtTransaction, DebtTransactionType
from src.domain.errors import DebtLedgerError, ValidationError
from src.domain.money import ZERO, round_cents, to_money
from .base import DebtLedgerUseCase
from .dtos import LedgerEntryResponseDTO, MarkPaidCommandDTO

logger = logging.getLogger(__name__)


class MarkPaid(DebtLedgerUseCase):
    """
    Use Case: Close a customer's open tab

    Business Rules:
    1. An OPEN tab must exist
    2. final_payment, when given, must be > 0 and may not exceed the balance;
       it is recorded as a PAYMENT before closure is evaluated
    3. The remaining balance must be zero, otherwise the tab stays open
    4. The tab is closed with total_balance = 0 and closed_at = transaction_date
    """

    async def execute(self, command: MarkPaidCommandDTO) -> Result[LedgerEntryResponseDTO]:
        try:
            final_payment = None
            if command.final_payment is not None:
                final_payment = round_cents(command.final_payment)
                if final_payment <= ZERO:
                    raise ValidationError(
                        "Final payment must be greater than 0",
                        details={"final_payment": str(final_payment)},
                    )
            actor = self._require_actor(command.entered_by_id)
            transaction_date = self._business_date(command.transaction_date)

            await self._lock_customer(command.customer_id)
            tab = await self._require_open_tab(command.customer_id)

            current_balance = tab.total_balance
            payment: Optional[DebtTransaction] = None

            if final_payment is not None:
                if final_payment > current_balance:
                    raise ValidationError(
                        "Final payment exceeds remaining balance",
                        details={"balance": str(current_balance), "requested": str(final_payment)},
                    )
                current_balance = max(ZERO, to_money(current_balance - final_payment))
                payment = await self.transaction_repo.append(
                    DebtTransaction(
                        debt_tab_id=tab.id,
                        transaction_type=DebtTransactionType.PAYMENT,
                        amount=final_payment,
                        balance_after=current_balance,
                        transaction_date=transaction_date,
                        entered_by_id=actor,
                    )
                )

            if current_balance > ZERO:
                raise ValidationError(
                    "Cannot close tab with non-zero balance",
                    details={"balance": str(current_balance)},
                )

            tab = await self.tab_repo.apply_balance(
                tab.id, ZERO, close_if_zero=True, closed_at=transaction_date
            )

            if payment is not None:
                self._queue_audit(
                    "CREATE",
                    "DebtTransaction",
                    payment.id,
                    self._transaction_changes(payment, command.customer_id),
                    actor,
                )
            self._queue_tab_closed(tab, actor)
            response = self._to_response_dto(tab, payment)
            await self._commit()

            logger.info(f"Debt tab closed for customer {command.customer_id} by {actor}")
            return Return.ok(response)

        except DebtLedgerError as e:
            logger.warning(f"Mark-paid rejected for customer {command.customer_id}: {e.message}")
            return await self._fail(e)

        except Exception as e:
            logger.exception(f"Mark-paid failed for customer {command.customer_id}")
            return await self._crash("MARK_PAID_FAILED", "Failed to close debt tab", e)
