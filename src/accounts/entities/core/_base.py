from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


class Record(BaseModel):
    """Base persisted record with a caller-assigned identifier and timestamps."""

    id: str = PydanticField(description="Unique identifier for the record")

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)


class RecordTable(SQLModel, table=False):
    """Base table with a caller-assigned primary key and timestamps."""

    id: str = Field(primary_key=True, description="Unique identifier for the record")

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
