from .base import BaseModel, generate_uuid, utcnow, to_naive_utc
from .customer import Customer
from .setting import Setting
from .debt_tab import DebtTab, TabStatus
from .debt_transaction import DebtTransaction, DebtTransactionType
from .audit_log import AuditLog, AuditAction
from .errors import (
    DebtLedgerError,
    NotFoundError,
    ValidationError,
    ConfigurationError,
    ConflictError,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "utcnow",
    "to_naive_utc",
    "Customer",
    "Setting",
    "DebtTab",
    "TabStatus",
    "DebtTransaction",
    "DebtTransactionType",
    "AuditLog",
    "AuditAction",
    "DebtLedgerError",
    "NotFoundError",
    "ValidationError",
    "ConfigurationError",
    "ConflictError",
]
