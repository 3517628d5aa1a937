"""Audit Log Domain Entity"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import String, Text
from src.domain.base import BaseModel, generate_uuid, timestamp_column, utcnow


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"


class AuditLog(BaseModel, table=True):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_entity", "entity", "entity_id"),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    action: AuditAction = Field(description="CREATE or UPDATE")

    entity: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Entity type (DebtTab, DebtTransaction)"
    )

    entity_id: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    changes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="JSON payload describing the change"
    )

    user_id: str = Field(description="Acting user, or 'system'")

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
