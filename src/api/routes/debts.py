"""Debt API Routes

FastAPI routes for the customer debt ledger.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.debt_tab_repository import SqlAlchemyDebtTabRepository
from src.adapter.repositories.debt_transaction_repository import SqlAlchemyDebtTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError, raise_for_error
from src.api.schemas.debt_request import (
    AdjustmentRequestSchema,
    ChargeRequestSchema,
    MarkPaidRequestSchema,
    PaymentRequestSchema,
)
from src.app.services.audit_service import AuditService
from src.app.services.unit_price_resolver import UnitPriceResolver
from src.app.use_cases.debts import (
    CustomerDebtHistoryDTO,
    CustomerDebtSnapshotDTO,
    DebtHistoryPageDTO,
    DebtHistoryQueryDTO,
    GetCustomerDebt,
    GetCustomerDebtHistory,
    GetOpenTabSummary,
    LedgerEntryResponseDTO,
    ListDebtTransactions,
    MarkPaid,
    MarkPaidCommandDTO,
    OpenTabSummaryDTO,
    RecordAdjustment,
    RecordAdjustmentCommandDTO,
    RecordCharge,
    RecordChargeCommandDTO,
    RecordPayment,
    RecordPaymentCommandDTO,
)
from src.domain.debt_transaction import DebtTransactionType
from src.depends import get_audit_service, get_price_resolver, get_session

router = APIRouter(prefix="/debts", tags=["Debts"])

ERROR_RESPONSES = {
    400: {
        "description": "Validation or business rule error",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "VALIDATION_ERROR",
                        "message": "Overpayment not allowed",
                        "reason": "balance=100.00, requested=150.00"
                    }
                }
            }
        }
    },
    404: {
        "description": "Customer or open tab not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "NOT_FOUND",
                        "message": "No open debt tab for customer"
                    }
                }
            }
        }
    },
}


async def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Acting user; authentication itself happens upstream"""
    if not x_user_id or not x_user_id.strip():
        raise ClientError(
            Error(code="UNAUTHENTICATED", message="X-User-Id header is required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return x_user_id.strip()


def _ledger_dependencies(session: AsyncSession, audit_service: AuditService) -> dict:
    return dict(
        uow=SqlAlchemyUnitOfWork(session),
        customer_repo=SqlAlchemyCustomerRepository(session),
        tab_repo=SqlAlchemyDebtTabRepository(session),
        transaction_repo=SqlAlchemyDebtTransactionRepository(session),
        audit_service=audit_service,
    )


@router.post(
    "/charge",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def record_charge(
    request: ChargeRequestSchema,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
    price_resolver: UnitPriceResolver = Depends(get_price_resolver),
):
    """
    Record containers sold on credit.

    Opens a new tab when the customer has no open one. The unit price is
    the customer's override if set, otherwise the global `unitPrice` setting.

    **Returns:**
    - 201: Charge recorded
    - 400: Invalid containers or inactive customer
    - 404: Customer not found
    - 500: Unit price is not configured
    """
    command = RecordChargeCommandDTO(
        customer_id=request.customer_id,
        containers=request.containers,
        transaction_date=request.transaction_date,
        notes=request.notes,
        entered_by_id=user_id,
    )

    use_case = RecordCharge(price_resolver=price_resolver, **_ledger_dependencies(session, audit_service))
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/payment",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def record_payment(
    request: PaymentRequestSchema,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """
    Record a payment against the customer's open tab.

    Paying the full balance closes the tab. Paying more than the balance is
    rejected.
    """
    command = RecordPaymentCommandDTO(
        customer_id=request.customer_id,
        amount=request.amount,
        transaction_date=request.transaction_date,
        notes=request.notes,
        entered_by_id=user_id,
    )

    result = await RecordPayment(**_ledger_dependencies(session, audit_service)).execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/adjustment",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def record_adjustment(
    request: AdjustmentRequestSchema,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """
    Adjust the customer's open tab by a signed amount with a reason.

    Adjustments never close the tab, even when the balance reaches zero.
    """
    command = RecordAdjustmentCommandDTO(
        customer_id=request.customer_id,
        amount=request.amount,
        reason=request.reason,
        transaction_date=request.transaction_date,
        notes=request.notes,
        entered_by_id=user_id,
    )

    result = await RecordAdjustment(**_ledger_dependencies(session, audit_service)).execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/mark-paid",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def mark_paid(
    request: MarkPaidRequestSchema,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """
    Close the customer's open tab, optionally after a final payment.

    The balance remaining after the final payment must be zero.
    """
    command = MarkPaidCommandDTO(
        customer_id=request.customer_id,
        transaction_date=request.transaction_date,
        entered_by_id=user_id,
        final_payment=request.final_payment,
    )

    result = await MarkPaid(**_ledger_dependencies(session, audit_service)).execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/summary", response_model=list[OpenTabSummaryDTO])
async def get_open_tab_summary(session: AsyncSession = Depends(get_session)):
    """Customers with an open tab, most recently updated first."""
    result = await GetOpenTabSummary(SqlAlchemyDebtTabRepository(session)).execute()
    return result.value


@router.get(
    "/customer/{customer_id}",
    response_model=CustomerDebtSnapshotDTO,
    responses={404: ERROR_RESPONSES[404]},
)
async def get_customer_debt(customer_id: str, session: AsyncSession = Depends(get_session)):
    """Customer, open tab (or null) and the open tab's transactions."""
    use_case = GetCustomerDebt(
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyDebtTabRepository(session),
        SqlAlchemyDebtTransactionRepository(session),
    )
    result = await use_case.execute(customer_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/customer/{customer_id}/history",
    response_model=CustomerDebtHistoryDTO,
    responses={404: ERROR_RESPONSES[404]},
)
async def get_customer_debt_history(customer_id: str, session: AsyncSession = Depends(get_session)):
    """All tabs of the customer and all transactions across them."""
    use_case = GetCustomerDebtHistory(
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyDebtTabRepository(session),
        SqlAlchemyDebtTransactionRepository(session),
    )
    result = await use_case.execute(customer_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/transactions", response_model=DebtHistoryPageDTO)
async def list_debt_transactions(
    customer_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    transaction_type: Optional[DebtTransactionType] = None,
    status_filter: Optional[str] = Query(default=None, alias="status"),
    page: int = Query(default=1),
    limit: int = Query(default=ApplicationConfig.HISTORY_DEFAULT_LIMIT),
    session: AsyncSession = Depends(get_session),
):
    """
    Global debt transaction history.

    **Query parameters:**
    - `customer_id`, `start_date`, `end_date` (inclusive)
    - `transaction_type`: CHARGE, PAYMENT or ADJUSTMENT
    - `status`: tab status OPEN, CLOSED or ALL
    - `page` (>= 1), `limit` (1..HISTORY_MAX_LIMIT)
    """
    query = DebtHistoryQueryDTO(
        customer_id=customer_id,
        start_date=start_date,
        end_date=end_date,
        transaction_type=transaction_type,
        status=status_filter,
        page=page,
        limit=limit,
    )
    use_case = ListDebtTransactions(
        SqlAlchemyDebtTransactionRepository(session),
        max_limit=ApplicationConfig.HISTORY_MAX_LIMIT,
    )
    result = await use_case.execute(query)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
