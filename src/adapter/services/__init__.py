from .unit_of_work import SqlAlchemyUnitOfWork
from .audit_service import (
    LoggingAuditService,
    DatabaseAuditService,
    WebhookAuditService,
    CompositeAuditService,
    create_audit_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingAuditService",
    "DatabaseAuditService",
    "WebhookAuditService",
    "CompositeAuditService",
    "create_audit_service",
]
