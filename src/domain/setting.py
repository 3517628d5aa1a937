"""Setting Domain Entity

Key/value settings row. The ledger reads the global unit price from here.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import String, Text
from src.domain.base import BaseModel, generate_uuid, timestamp_column, utcnow


class Setting(BaseModel, table=True):
    __tablename__ = "settings"

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    key: str = Field(
        sa_column=Column(String(100), nullable=False, unique=True),
        description="Setting key (e.g. 'unitPrice')"
    )

    value: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Raw setting value, parsed by the consumer"
    )

    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
