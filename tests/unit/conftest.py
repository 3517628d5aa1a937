import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.customer import Customer
from src.domain.debt_tab import DebtTab, TabStatus


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_audit_service():
    """Mock audit sink"""
    service = MagicMock()
    service.record = AsyncMock(return_value=True)
    return service


@pytest.fixture
def sample_customer():
    return Customer(
        id="cust_123",
        name="Cafe Aurora",
        active=True,
        custom_unit_price=None,
        created_at=datetime(2025, 1, 1),
        updated_at=datetime(2025, 1, 1),
    )


@pytest.fixture
def make_tab():
    """Factory for debt tabs owned by cust_123"""
    def _make_tab(balance: str, status: TabStatus = TabStatus.OPEN, tab_id: str = "tab_1"):
        return DebtTab(
            id=tab_id,
            customer_id="cust_123",
            status=status,
            total_balance=Decimal(balance),
            opened_at=datetime(2025, 11, 1),
            closed_at=datetime(2025, 11, 20) if status == TabStatus.CLOSED else None,
            created_at=datetime(2025, 11, 1),
            updated_at=datetime(2025, 11, 1),
        )
    return _make_tab
