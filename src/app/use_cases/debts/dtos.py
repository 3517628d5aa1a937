"""Data Transfer Objects for Debt Ledger Use Cases

Pydantic models for command inputs and response outputs. Commands only
carry types; range and business checks happen in the use cases so that
every rejection comes back as a typed ledger error.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from src.domain.debt_tab import TabStatus
from src.domain.debt_transaction import DebtTransactionType


class RecordChargeCommandDTO(BaseModel):
    """Containers sold on credit to a customer"""

    customer_id: str = Field(..., description="Customer identifier")

    containers: Decimal = Field(..., description="Containers sold (must be > 0)")

    transaction_date: datetime = Field(..., description="Business date of the sale")

    notes: Optional[str] = Field(default=None)

    entered_by_id: str = Field(..., description="Acting user")

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "5b0c6c1e-3f0e-4c55-9d0e-8f1f2b7b1a11",
                "containers": "5",
                "transaction_date": "2025-11-11T09:00:00Z",
                "notes": "Morning delivery",
                "entered_by_id": "user_42"
            }
        }


class RecordPaymentCommandDTO(BaseModel):
    """Customer pays down the open tab"""

    customer_id: str = Field(..., description="Customer identifier")

    amount: Decimal = Field(..., description="Amount paid (must be > 0)")

    transaction_date: datetime = Field(..., description="Business date of the payment")

    notes: Optional[str] = Field(default=None)

    entered_by_id: str = Field(..., description="Acting user")


class RecordAdjustmentCommandDTO(BaseModel):
    """Manual correction of the open tab's balance"""

    customer_id: str = Field(..., description="Customer identifier")

    amount: Decimal = Field(
        ...,
        description="Signed delta: positive increases the balance, negative decreases it"
    )

    reason: str = Field(..., description="Why the balance is adjusted (required)")

    transaction_date: datetime = Field(...)

    notes: Optional[str] = Field(default=None)

    entered_by_id: str = Field(..., description="Acting user")


class MarkPaidCommandDTO(BaseModel):
    """Close the open tab, optionally after one final payment"""

    customer_id: str = Field(..., description="Customer identifier")

    transaction_date: datetime = Field(..., description="Closure date")

    entered_by_id: str = Field(..., description="Acting user")

    final_payment: Optional[Decimal] = Field(
        default=None,
        description="Payment applied before closing (must be > 0 when present)"
    )


class DebtTabDTO(BaseModel):
    id: str
    customer_id: str
    status: TabStatus
    total_balance: Decimal
    opened_at: datetime
    closed_at: Optional[datetime] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class DebtTransactionDTO(BaseModel):
    id: str
    debt_tab_id: str
    transaction_type: DebtTransactionType
    containers: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    amount: Decimal
    balance_after: Decimal
    adjustment_reason: Optional[str] = None
    notes: Optional[str] = None
    transaction_date: datetime
    entered_by_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class LedgerEntryResponseDTO(BaseModel):
    """
    Response DTO for ledger mutations

    Returned by RecordCharge, RecordPayment, RecordAdjustment and MarkPaid.
    ``transaction`` is None only for MarkPaid without a final payment.
    """

    transaction: Optional[DebtTransactionDTO] = Field(
        default=None,
        description="Transaction appended by this operation"
    )

    tab: DebtTabDTO = Field(..., description="Tab state after the operation")

    class Config:
        json_schema_extra = {
            "example": {
                "transaction": {
                    "id": "0b8f...",
                    "debt_tab_id": "9a1c...",
                    "transaction_type": "CHARGE",
                    "containers": "5.000",
                    "unit_price": "23.00",
                    "amount": "115.00",
                    "balance_after": "115.00",
                    "adjustment_reason": None,
                    "notes": None,
                    "transaction_date": "2025-11-11T09:00:00",
                    "entered_by_id": "user_42",
                    "created_at": "2025-11-11T09:00:03"
                },
                "tab": {
                    "id": "9a1c...",
                    "customer_id": "5b0c...",
                    "status": "OPEN",
                    "total_balance": "115.00",
                    "opened_at": "2025-11-11T09:00:03",
                    "closed_at": None,
                    "updated_at": "2025-11-11T09:00:03"
                }
            }
        }


class CustomerDTO(BaseModel):
    id: str
    name: str
    active: bool
    custom_unit_price: Optional[Decimal] = None

    class Config:
        from_attributes = True


class CustomerDebtSnapshotDTO(BaseModel):
    """Customer with the open tab (if any) and that tab's transactions"""

    customer: CustomerDTO
    tab: Optional[DebtTabDTO] = None
    transactions: list[DebtTransactionDTO] = Field(default_factory=list)


class CustomerDebtHistoryDTO(BaseModel):
    """Every tab of a customer and every transaction across them"""

    tabs: list[DebtTabDTO] = Field(default_factory=list)
    transactions: list[DebtTransactionDTO] = Field(default_factory=list)


class DebtHistoryQueryDTO(BaseModel):
    """Filters for the global transaction history"""

    customer_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    transaction_type: Optional[DebtTransactionType] = None
    status: Optional[str] = Field(
        default=None,
        description="OPEN, CLOSED or ALL (tab status)"
    )
    page: int = 1
    limit: int = 50


class DebtHistoryItemDTO(DebtTransactionDTO):
    """Transaction joined with its tab and customer"""

    customer_id: str
    customer_name: str
    tab_status: TabStatus


class DebtHistoryPageDTO(BaseModel):
    transactions: list[DebtHistoryItemDTO]
    page: int
    limit: int
    total: int
    total_pages: int


class OpenTabSummaryDTO(BaseModel):
    tab_id: str
    customer_id: str
    customer_name: str
    balance: Decimal
    status: TabStatus
    opened_at: datetime
    last_updated: datetime


class TabDiscrepancyDTO(BaseModel):
    tab_id: str
    customer_id: str
    status: TabStatus
    tab_balance: Decimal
    replayed_balance: Decimal
    issue: str = Field(..., description="What disagrees with the replayed log")
    transaction_id: Optional[str] = Field(
        default=None,
        description="First transaction whose balance_after does not match the replay"
    )


class DebtReconciliationResultDTO(BaseModel):
    total_tabs_checked: int
    discrepancies_found: int
    discrepancies: list[TabDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
