"""Domain exceptions for the debt ledger

Exception Hierarchy:
    DebtLedgerError (base)
    ├── NotFoundError - customer or open tab does not exist
    ├── ValidationError - bad input or a ledger business rule was violated
    ├── ConfigurationError - unit price cannot be resolved (operator problem)
    └── ConflictError - storage rejected a concurrent open-tab creation

Each error carries a stable ``code`` that callers can switch on and a
``details`` dict with the values needed to format a message.
"""

from typing import Any, Dict, Optional


class DebtLedgerError(Exception):
    code = "DEBT_LEDGER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(DebtLedgerError):
    code = "NOT_FOUND"


class ValidationError(DebtLedgerError):
    code = "VALIDATION_ERROR"


class ConfigurationError(DebtLedgerError):
    code = "CONFIGURATION_ERROR"


class ConflictError(DebtLedgerError):
    code = "CONFLICT"
