"""Customer Domain Entity

Owned by the customer module; the ledger only reads it to validate the
customer and to find a per-customer price override.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel, generate_uuid, timestamp_column, utcnow


class Customer(BaseModel, table=True):
    __tablename__ = "customers"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Customer identifier"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name"
    )

    active: bool = Field(
        default=True,
        description="Inactive customers cannot take on new debt"
    )

    custom_unit_price: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
        description="Per-customer price override (ignored unless > 0)"
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())

    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
