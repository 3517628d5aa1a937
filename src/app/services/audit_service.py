"""Audit Service Interface

Receives ledger events after they are committed. From the ledger's point
of view recording is fire-and-forget: a failing sink must not undo or
fail the ledger operation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

SYSTEM_USER = "system"


class AuditService(ABC):
    """
    Abstract audit sink

    Implementations can persist to:
    - The audit_logs table
    - The application log
    - A webhook
    """

    @abstractmethod
    async def record(
        self,
        action: str,
        entity: str,
        entity_id: str,
        changes: Optional[Dict[str, Any]],
        user_id: str,
    ) -> bool:
        """
        Record one audit event

        Args:
            action: CREATE or UPDATE
            entity: Entity type (e.g. "DebtTransaction")
            entity_id: ID of the affected entity
            changes: JSON-serializable payload describing the change
            user_id: Acting user ("system" for implicit actions)

        Returns:
            True if the event was recorded, False otherwise
        """
        pass
