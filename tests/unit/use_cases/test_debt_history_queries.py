"""Unit tests for the read-side debt use cases

Tests cover:
- GetCustomerDebt: open tab snapshot, no open tab, unknown customer
- GetCustomerDebtHistory: all tabs and transactions
- ListDebtTransactions: filters, pagination and validation
- GetOpenTabSummary
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.repositories.debt_transaction_repository import TransactionFilter
from src.app.use_cases.debts import (
    DebtHistoryQueryDTO,
    GetCustomerDebt,
    GetCustomerDebtHistory,
    GetOpenTabSummary,
    ListDebtTransactions,
)
from src.domain.debt_tab import TabStatus
from src.domain.debt_transaction import DebtTransaction, DebtTransactionType
from tests.unit.use_cases.ledger_fakes import customer_repo_for


def make_transaction(trx_id, transaction_type, amount, balance_after, day):
    return DebtTransaction(
        id=trx_id,
        debt_tab_id="tab_1",
        transaction_type=transaction_type,
        containers=Decimal("5") if transaction_type == DebtTransactionType.CHARGE else None,
        unit_price=Decimal("23.00") if transaction_type == DebtTransactionType.CHARGE else None,
        amount=Decimal(amount),
        balance_after=Decimal(balance_after),
        transaction_date=datetime(2025, 11, day),
        entered_by_id="user_42",
        created_at=datetime(2025, 11, day),
    )


@pytest.fixture
def charge_and_payment():
    return [
        make_transaction("trx_2", DebtTransactionType.PAYMENT, "15.00", "100.00", 12),
        make_transaction("trx_1", DebtTransactionType.CHARGE, "115.00", "115.00", 11),
    ]


@pytest.mark.asyncio
class TestGetCustomerDebt:

    async def test_returns_open_tab_and_its_transactions(
        self, sample_customer, make_tab, charge_and_payment
    ):
        tab_repo = MagicMock()
        tab_repo.get_open_by_customer = AsyncMock(return_value=make_tab("100.00"))
        transaction_repo = MagicMock()
        transaction_repo.list_for_tab = AsyncMock(return_value=charge_and_payment)

        result = await GetCustomerDebt(
            customer_repo_for(sample_customer), tab_repo, transaction_repo
        ).execute("cust_123")

        assert result.is_ok()
        snapshot = result.value
        assert snapshot.customer.name == "Cafe Aurora"
        assert snapshot.tab.total_balance == Decimal("100.00")
        assert [t.id for t in snapshot.transactions] == ["trx_2", "trx_1"]
        transaction_repo.list_for_tab.assert_called_once_with("tab_1")

    async def test_no_open_tab_returns_empty_snapshot(self, sample_customer):
        tab_repo = MagicMock()
        tab_repo.get_open_by_customer = AsyncMock(return_value=None)
        transaction_repo = MagicMock()
        transaction_repo.list_for_tab = AsyncMock()

        result = await GetCustomerDebt(
            customer_repo_for(sample_customer), tab_repo, transaction_repo
        ).execute("cust_123")

        assert result.is_ok()
        assert result.value.tab is None
        assert result.value.transactions == []
        transaction_repo.list_for_tab.assert_not_called()

    async def test_unknown_customer_not_found(self):
        result = await GetCustomerDebt(customer_repo_for(None), MagicMock(), MagicMock()).execute("missing")

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"


@pytest.mark.asyncio
class TestGetCustomerDebtHistory:

    async def test_returns_every_tab_and_transaction(
        self, sample_customer, make_tab, charge_and_payment
    ):
        tab_repo = MagicMock()
        tab_repo.list_by_customer = AsyncMock(
            return_value=[make_tab("100.00", tab_id="tab_2"), make_tab("0.00", TabStatus.CLOSED)]
        )
        transaction_repo = MagicMock()
        transaction_repo.list_for_customer = AsyncMock(return_value=charge_and_payment)

        result = await GetCustomerDebtHistory(
            customer_repo_for(sample_customer), tab_repo, transaction_repo
        ).execute("cust_123")

        assert result.is_ok()
        assert [t.status for t in result.value.tabs] == [TabStatus.OPEN, TabStatus.CLOSED]
        assert len(result.value.transactions) == 2

    async def test_customer_without_tabs_has_empty_history(self, sample_customer):
        tab_repo = MagicMock()
        tab_repo.list_by_customer = AsyncMock(return_value=[])
        transaction_repo = MagicMock()
        transaction_repo.list_for_customer = AsyncMock()

        result = await GetCustomerDebtHistory(
            customer_repo_for(sample_customer), tab_repo, transaction_repo
        ).execute("cust_123")

        assert result.is_ok()
        assert result.value.tabs == []
        assert result.value.transactions == []
        transaction_repo.list_for_customer.assert_not_called()


@pytest.mark.asyncio
class TestListDebtTransactions:

    @pytest.fixture
    def transaction_repo(self, sample_customer, make_tab, charge_and_payment):
        repo = MagicMock()
        tab = make_tab("100.00")
        repo.list_filtered = AsyncMock(
            return_value=([(t, tab, sample_customer) for t in charge_and_payment], 7)
        )
        return repo

    async def test_builds_filter_and_page(self, transaction_repo):
        query = DebtHistoryQueryDTO(
            customer_id="cust_123",
            start_date=datetime(2025, 11, 1, tzinfo=timezone.utc),
            end_date=datetime(2025, 11, 30),
            transaction_type=DebtTransactionType.CHARGE,
            status="open",
            page=2,
            limit=5,
        )

        result = await ListDebtTransactions(transaction_repo).execute(query)

        assert result.is_ok()
        page = result.value
        assert page.page == 2
        assert page.limit == 5
        assert page.total == 7
        assert page.total_pages == 2
        assert page.transactions[0].customer_name == "Cafe Aurora"
        assert page.transactions[0].tab_status == TabStatus.OPEN

        transaction_repo.list_filtered.assert_called_once_with(
            TransactionFilter(
                customer_id="cust_123",
                start_date=datetime(2025, 11, 1),
                end_date=datetime(2025, 11, 30),
                transaction_type=DebtTransactionType.CHARGE,
                tab_status=TabStatus.OPEN,
                limit=5,
                offset=5,
            )
        )

    @pytest.mark.parametrize("status", [None, "ALL", "all"])
    async def test_all_statuses_apply_no_status_filter(self, transaction_repo, status):
        result = await ListDebtTransactions(transaction_repo).execute(DebtHistoryQueryDTO(status=status))

        assert result.is_ok()
        criteria = transaction_repo.list_filtered.call_args.args[0]
        assert criteria.tab_status is None
        assert criteria.limit == 50
        assert criteria.offset == 0

    @pytest.mark.parametrize(
        "page,limit",
        [(0, 50), (1, 0), (1, 201)],
    )
    async def test_out_of_range_paging_rejected(self, transaction_repo, page, limit):
        result = await ListDebtTransactions(transaction_repo).execute(
            DebtHistoryQueryDTO(page=page, limit=limit)
        )

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        transaction_repo.list_filtered.assert_not_called()

    async def test_unknown_status_rejected(self, transaction_repo):
        result = await ListDebtTransactions(transaction_repo).execute(DebtHistoryQueryDTO(status="PENDING"))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.details == {"status": "PENDING"}

    async def test_empty_result_has_zero_pages(self):
        repo = MagicMock()
        repo.list_filtered = AsyncMock(return_value=([], 0))

        result = await ListDebtTransactions(repo).execute(DebtHistoryQueryDTO())

        assert result.value.total == 0
        assert result.value.total_pages == 0


@pytest.mark.asyncio
class TestGetOpenTabSummary:

    async def test_lists_open_tabs_with_customer_names(self, make_tab):
        tab_repo = MagicMock()
        tab_repo.list_open_with_customers = AsyncMock(
            return_value=[(make_tab("100.00"), "Cafe Aurora"), (make_tab("46.00", tab_id="tab_9"), "Bistro Nine")]
        )

        result = await GetOpenTabSummary(tab_repo).execute()

        assert result.is_ok()
        assert [s.customer_name for s in result.value] == ["Cafe Aurora", "Bistro Nine"]
        assert result.value[1].balance == Decimal("46.00")
        assert result.value[1].tab_id == "tab_9"
