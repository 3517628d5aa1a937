"""Debt ledger use cases"""
from .record_charge import RecordCharge
from .record_payment import RecordPayment
from .record_adjustment import RecordAdjustment
from .mark_paid import MarkPaid
from .get_customer_debt import GetCustomerDebt
from .get_customer_debt_history import GetCustomerDebtHistory
from .list_debt_transactions import ListDebtTransactions
from .get_open_tab_summary import GetOpenTabSummary
from .reconcile_debt_tabs import ReconcileDebtTabs, replay_transaction
from .dtos import (
    RecordChargeCommandDTO,
    RecordPaymentCommandDTO,
    RecordAdjustmentCommandDTO,
    MarkPaidCommandDTO,
    DebtTabDTO,
    DebtTransactionDTO,
    LedgerEntryResponseDTO,
    CustomerDTO,
    CustomerDebtSnapshotDTO,
    CustomerDebtHistoryDTO,
    DebtHistoryQueryDTO,
    DebtHistoryItemDTO,
    DebtHistoryPageDTO,
    OpenTabSummaryDTO,
    TabDiscrepancyDTO,
    DebtReconciliationResultDTO,
)

__all__ = [
    "RecordCharge",
    "RecordPayment",
    "RecordAdjustment",
    "MarkPaid",
    "GetCustomerDebt",
    "GetCustomerDebtHistory",
    "ListDebtTransactions",
    "GetOpenTabSummary",
    "ReconcileDebtTabs",
    "replay_transaction",
    "RecordChargeCommandDTO",
    "RecordPaymentCommandDTO",
    "RecordAdjustmentCommandDTO",
    "MarkPaidCommandDTO",
    "DebtTabDTO",
    "DebtTransactionDTO",
    "LedgerEntryResponseDTO",
    "CustomerDTO",
    "CustomerDebtSnapshotDTO",
    "CustomerDebtHistoryDTO",
    "DebtHistoryQueryDTO",
    "DebtHistoryItemDTO",
    "DebtHistoryPageDTO",
    "OpenTabSummaryDTO",
    "TabDiscrepancyDTO",
    "DebtReconciliationResultDTO",
]
