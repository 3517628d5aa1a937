from .unit_of_work import UnitOfWork
from .audit_service import AuditService, SYSTEM_USER
from .unit_price_resolver import UnitPriceResolver

__all__ = [
    "UnitOfWork",
    "AuditService",
    "SYSTEM_USER",
    "UnitPriceResolver",
]
