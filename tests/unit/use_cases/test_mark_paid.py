"""Unit tests for MarkPaid use case

Tests cover:
- Final payment that clears the balance closes the tab
- Zero-balance tab closes without a payment (transaction is None)
- Remaining balance blocks closure
- Final payment validation
"""

import pytest
from datetime import datetime
from decimal import Decimal

from src.app.use_cases.debts.dtos import MarkPaidCommandDTO
from src.app.use_cases.debts.mark_paid import MarkPaid
from src.domain.debt_tab import TabStatus
from src.domain.debt_transaction import DebtTransactionType
from tests.unit.use_cases.ledger_fakes import customer_repo_for, tab_repo_for, transaction_repo_echo

CLOSED_ON = datetime(2025, 11, 30, 18, 0)


def build_use_case(mock_uow, customer, tab_repo, transaction_repo=None, audit=None):
    return MarkPaid(
        uow=mock_uow,
        customer_repo=customer_repo_for(customer),
        tab_repo=tab_repo,
        transaction_repo=transaction_repo or transaction_repo_echo(),
        audit_service=audit,
    )


def mark_paid(final_payment=None):
    return MarkPaidCommandDTO(
        customer_id="cust_123",
        transaction_date=CLOSED_ON,
        entered_by_id="user_42",
        final_payment=Decimal(final_payment) if final_payment is not None else None,
    )


@pytest.mark.asyncio
class TestMarkPaidSuccess:

    async def test_final_payment_clears_and_closes(
        self, mock_uow, mock_audit_service, sample_customer, make_tab
    ):
        """
        Given: Open tab with balance 80
        When: mark-paid with final payment 80
        Then: PAYMENT of 80 recorded and the tab is CLOSED at the given date
        """
        tab_repo = tab_repo_for(make_tab("80.00"))
        transaction_repo = transaction_repo_echo()
        use_case = build_use_case(mock_uow, sample_customer, tab_repo, transaction_repo, mock_audit_service)

        result = await use_case.execute(mark_paid("80"))

        assert result.is_ok()
        assert result.value.transaction.transaction_type == DebtTransactionType.PAYMENT
        assert result.value.transaction.amount == Decimal("80.00")
        assert result.value.transaction.balance_after == Decimal("0.00")
        assert result.value.tab.status == TabStatus.CLOSED
        assert result.value.tab.closed_at == CLOSED_ON
        tab_repo.apply_balance.assert_called_once_with(
            "tab_1", Decimal("0.00"), close_if_zero=True, closed_at=CLOSED_ON
        )
        mock_uow.commit.assert_called_once()

        actions = [(c.args[0], c.args[1]) for c in mock_audit_service.record.call_args_list]
        assert actions == [("CREATE", "DebtTransaction"), ("UPDATE", "DebtTab")]

    async def test_zero_balance_closes_without_payment(self, mock_uow, sample_customer, make_tab):
        transaction_repo = transaction_repo_echo()
        use_case = build_use_case(mock_uow, sample_customer, tab_repo_for(make_tab("0.00")), transaction_repo)

        result = await use_case.execute(mark_paid())

        assert result.is_ok()
        assert result.value.transaction is None
        assert result.value.tab.status == TabStatus.CLOSED
        transaction_repo.append.assert_not_called()


@pytest.mark.asyncio
class TestMarkPaidValidation:

    async def test_remaining_balance_blocks_closure(self, mock_uow, sample_customer, make_tab):
        tab_repo = tab_repo_for(make_tab("80.00"))
        use_case = build_use_case(mock_uow, sample_customer, tab_repo)

        result = await use_case.execute(mark_paid("30"))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.message == "Cannot close tab with non-zero balance"
        assert result.error.details == {"balance": "50.00"}
        tab_repo.apply_balance.assert_not_called()
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_no_payment_with_balance_blocks_closure(self, mock_uow, sample_customer, make_tab):
        use_case = build_use_case(mock_uow, sample_customer, tab_repo_for(make_tab("10.00")))

        result = await use_case.execute(mark_paid())

        assert result.is_err()
        assert result.error.message == "Cannot close tab with non-zero balance"

    async def test_final_payment_above_balance_rejected(self, mock_uow, sample_customer, make_tab):
        transaction_repo = transaction_repo_echo()
        use_case = build_use_case(mock_uow, sample_customer, tab_repo_for(make_tab("80.00")), transaction_repo)

        result = await use_case.execute(mark_paid("100"))

        assert result.is_err()
        assert result.error.message == "Final payment exceeds remaining balance"
        transaction_repo.append.assert_not_called()

    async def test_oversized_final_payment_exceeds_balance(self, mock_uow, sample_customer, make_tab):
        transaction_repo = transaction_repo_echo()
        use_case = build_use_case(mock_uow, sample_customer, tab_repo_for(make_tab("80.00")), transaction_repo)

        result = await use_case.execute(mark_paid("1E+27"))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.message == "Final payment exceeds remaining balance"
        transaction_repo.append.assert_not_called()

    @pytest.mark.parametrize("final_payment", ["0", "-5"])
    async def test_non_positive_final_payment_rejected(
        self, mock_uow, sample_customer, make_tab, final_payment
    ):
        use_case = build_use_case(mock_uow, sample_customer, tab_repo_for(make_tab("80.00")))

        result = await use_case.execute(mark_paid(final_payment))

        assert result.is_err()
        assert result.error.message == "Final payment must be greater than 0"

    async def test_no_open_tab_not_found(self, mock_uow, sample_customer):
        use_case = build_use_case(mock_uow, sample_customer, tab_repo_for(None))

        result = await use_case.execute(mark_paid("10"))

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"
        assert result.error.message == "No open debt tab for customer"
