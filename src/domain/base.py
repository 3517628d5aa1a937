"""Shared base for SQLModel entities"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp (columns are TIMESTAMP WITHOUT TIME ZONE)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def timestamp_column(nullable: bool = False, index: bool = False) -> Column:
    """TIMESTAMP WITHOUT TIME ZONE column holding naive UTC values"""
    return Column(DateTime(timezone=False), nullable=nullable, index=index)


class BaseModel(SQLModel):
    pass


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
