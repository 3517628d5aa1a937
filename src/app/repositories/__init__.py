from .customer_repository import CustomerRepository
from .setting_repository import SettingRepository
from .debt_tab_repository import DebtTabRepository
from .debt_transaction_repository import DebtTransactionRepository, TransactionFilter

__all__ = [
    "CustomerRepository",
    "SettingRepository",
    "DebtTabRepository",
    "DebtTransactionRepository",
    "TransactionFilter",
]
