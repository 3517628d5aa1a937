"""Request schemas for Debt API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class ChargeRequestSchema(BaseModel):
    """
    Request schema for recording a charge

    Used for POST /debts/charge endpoint.
    """

    customer_id: str = Field(
        ...,
        min_length=1,
        description="Customer identifier (required, non-empty)"
    )

    containers: Decimal = Field(
        ...,
        gt=0,
        description="Containers sold on credit (must be > 0)"
    )

    transaction_date: datetime = Field(..., description="Business date of the sale")

    notes: Optional[str] = Field(default=None, max_length=500)

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "5b0c6c1e-3f0e-4c55-9d0e-8f1f2b7b1a11",
                "containers": 5,
                "transaction_date": "2025-11-11T09:00:00Z",
                "notes": "Morning delivery"
            }
        }


class PaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /debts/payment endpoint.
    """

    customer_id: str = Field(..., min_length=1)

    amount: Decimal = Field(..., gt=0, description="Amount paid (must be > 0)")

    transaction_date: datetime = Field(...)

    notes: Optional[str] = Field(default=None, max_length=500)


class AdjustmentRequestSchema(BaseModel):
    """
    Request schema for recording an adjustment

    Used for POST /debts/adjustment endpoint.
    """

    customer_id: str = Field(..., min_length=1)

    amount: Decimal = Field(
        ...,
        description="Signed adjustment (non-zero); negative credits the customer"
    )

    reason: str = Field(..., min_length=2, description="Why the balance is adjusted")

    transaction_date: datetime = Field(...)

    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        """Adjustment must change the balance"""
        if v == 0:
            raise ValueError("Amount cannot be zero")
        return v

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, v):
        if not v.strip():
            raise ValueError("Reason cannot be blank")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "5b0c6c1e-3f0e-4c55-9d0e-8f1f2b7b1a11",
                "amount": "-50.00",
                "reason": "goodwill",
                "transaction_date": "2025-11-12T10:00:00Z"
            }
        }


class MarkPaidRequestSchema(BaseModel):
    """
    Request schema for closing a tab

    Used for POST /debts/mark-paid endpoint.
    """

    customer_id: str = Field(..., min_length=1)

    transaction_date: datetime = Field(...)

    final_payment: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Payment recorded before closing (must be > 0 when present)"
    )
