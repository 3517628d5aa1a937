"""Debt Tab Domain Entity

A customer's running balance. Balance changes only through
DebtTransactions; a closed tab is history and is never reopened.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, text
from src.domain.base import BaseModel, generate_uuid, timestamp_column, utcnow


class TabStatus(str, Enum):
    """Debt tab lifecycle: OPEN -> CLOSED (terminal)"""
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class DebtTab(BaseModel, table=True):
    """
    Debt Tab - Running balance for one customer

    Domain Rules:
    - At most one OPEN tab per customer (partial unique index)
    - total_balance is never negative
    - total_balance equals balance_after of the tab's latest transaction
    - Created on the first charge against a customer with no open tab
    - Closed when a payment or mark-paid brings the balance to zero
    """

    __tablename__ = "debt_tabs"
    __table_args__ = (
        CheckConstraint("total_balance >= 0", name="debt_tab_balance_non_negative"),
        Index(
            "uq_debt_tabs_customer_open",
            "customer_id",
            unique=True,
            postgresql_where=text("status = 'OPEN'"),
            sqlite_where=text("status = 'OPEN'"),
        ),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Tab identifier"
    )

    customer_id: str = Field(
        foreign_key="customers.id",
        index=True,
        description="Owning customer"
    )

    status: TabStatus = Field(
        default=TabStatus.OPEN,
        index=True,
        description="OPEN or CLOSED"
    )

    total_balance: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Outstanding amount (>= 0)"
    )

    opened_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="When the tab was opened"
    )

    closed_at: Optional[datetime] = Field(
        default=None,
        sa_column=timestamp_column(nullable=True),
        description="Business date of closure (None while open)"
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())

    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())

    @property
    def is_open(self) -> bool:
        return self.status == TabStatus.OPEN
