"""Audit Service Implementations

Provides concrete sinks for ledger audit events.
"""

import json
import logging
from typing import Any, Dict, Optional
import httpx
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.audit_service import AuditService
from src.domain.audit_log import AuditAction, AuditLog

logger = logging.getLogger(__name__)


class LoggingAuditService(AuditService):
    """
    Audit service that writes events to the application log

    Useful for development and testing, or as a fallback.
    """

    async def record(
        self,
        action: str,
        entity: str,
        entity_id: str,
        changes: Optional[Dict[str, Any]],
        user_id: str,
    ) -> bool:
        logger.info(
            f"[AUDIT] {action} {entity} {entity_id} by {user_id}: "
            f"{json.dumps(changes or {}, default=str)}"
        )
        return True


class DatabaseAuditService(AuditService):
    """
    Audit service that persists events to the audit_logs table

    Runs after the ledger unit of work has committed and commits on its
    own, so a failed audit write never undoes a ledger entry.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(
        self,
        action: str,
        entity: str,
        entity_id: str,
        changes: Optional[Dict[str, Any]],
        user_id: str,
    ) -> bool:
        entry = AuditLog(
            action=AuditAction(action),
            entity=entity,
            entity_id=entity_id,
            changes=json.dumps(changes, default=str) if changes is not None else None,
            user_id=user_id,
        )
        try:
            self.session.add(entry)
            await self.session.commit()
            return True
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to persist audit log for {entity} {entity_id}: {e}")
            return False


class WebhookAuditService(AuditService):
    """
    Audit service that forwards events via HTTP webhook
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def record(
        self,
        action: str,
        entity: str,
        entity_id: str,
        changes: Optional[Dict[str, Any]],
        user_id: str,
    ) -> bool:
        payload = {
            "type": "audit_event",
            "action": action,
            "entity": entity,
            "entity_id": entity_id,
            "changes": changes,
            "user_id": user_id,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    content=json.dumps(payload, default=str),
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send audit event for {entity} {entity_id}: {e}")
            return False


class CompositeAuditService(AuditService):
    """
    Audit service that delegates to multiple sinks
    """

    def __init__(self, services: list[AuditService]):
        self.services = services

    async def record(
        self,
        action: str,
        entity: str,
        entity_id: str,
        changes: Optional[Dict[str, Any]],
        user_id: str,
    ) -> bool:
        success = False
        for service in self.services:
            try:
                if await service.record(action, entity, entity_id, changes, user_id):
                    success = True
            except Exception as e:
                logger.error(f"Audit service {type(service).__name__} failed: {e}")
        return success


def create_audit_service(
    session: Optional[AsyncSession] = None,
    webhook_url: Optional[str] = None,
    persist: bool = True,
) -> AuditService:
    """
    Factory function to create the audit sink

    Args:
        session: Session used to persist audit_logs rows (skipped if None)
        webhook_url: Optional webhook receiving every event
        persist: Write audit_logs rows when a session is available

    Returns:
        A single sink, or a composite when more than one applies
    """
    services: list[AuditService] = [LoggingAuditService()]

    if persist and session is not None:
        services.append(DatabaseAuditService(session))

    if webhook_url:
        services.append(WebhookAuditService(webhook_url))

    if len(services) == 1:
        return services[0]
    return CompositeAuditService(services)
