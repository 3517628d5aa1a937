"""Debt Transaction Domain Entity

Immutable append-only ledger entry. Each row records the balance of its
tab right after it was applied.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, Text
from src.domain.base import BaseModel, generate_uuid, timestamp_column, utcnow


class DebtTransactionType(str, Enum):
    """Debt transaction types"""
    CHARGE = "CHARGE"            # Containers sold on credit (+amount)
    PAYMENT = "PAYMENT"          # Customer paid down the tab (-amount)
    ADJUSTMENT = "ADJUSTMENT"    # Manual correction, signed amount


class DebtTransaction(BaseModel, table=True):
    """
    Debt Transaction - One immutable entry of a tab's audit trail

    Domain Rules:
    - Belongs to exactly one tab, never moves
    - Never updated or deleted
    - CHARGE: containers and unit_price set, amount = containers * unit_price
    - PAYMENT: positive amount subtracted from the balance
    - ADJUSTMENT: signed amount, adjustment_reason required
    - balance_after is a point-in-time snapshot, never recomputed
    """

    __tablename__ = "debt_transactions"
    __table_args__ = (
        CheckConstraint("balance_after >= 0", name="debt_transaction_balance_non_negative"),
        CheckConstraint(
            "transaction_type != 'CHARGE' OR (containers > 0 AND unit_price > 0)",
            name="debt_transaction_charge_priced",
        ),
        CheckConstraint(
            "transaction_type != 'ADJUSTMENT' OR adjustment_reason IS NOT NULL",
            name="debt_transaction_adjustment_reason",
        ),
        Index("ix_debt_transactions_tab_date", "debt_tab_id", "transaction_date"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Transaction identifier"
    )

    debt_tab_id: str = Field(
        foreign_key="debt_tabs.id",
        index=True,
        description="Owning tab"
    )

    transaction_type: DebtTransactionType = Field(
        index=True,
        description="CHARGE, PAYMENT or ADJUSTMENT"
    )

    containers: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 3), nullable=True),
        description="Containers sold (CHARGE only)"
    )

    unit_price: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
        description="Price per container applied (CHARGE only)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Effect of this entry before clamping"
    )

    balance_after: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Tab balance right after this entry"
    )

    adjustment_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Why the balance was adjusted (ADJUSTMENT only)"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    transaction_date: datetime = Field(
        sa_column=timestamp_column(index=True),
        description="Caller-supplied business date"
    )

    entered_by_id: str = Field(
        index=True,
        description="User who recorded the entry"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="System timestamp (immutable)"
    )

    @property
    def signed_amount(self) -> Decimal:
        """Delta this entry applies to its tab"""
        if self.transaction_type == DebtTransactionType.PAYMENT:
            return -self.amount
        return self.amount
