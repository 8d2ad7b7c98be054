"""SQLModel data models.

This module defines the two store tables: uploaded file metadata and
calendar events. The tables are unrelated; nothing cascades between them.
"""

from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy.types import DateTime, TypeDecorator
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Stores naive UTC timestamps and hands back aware UTC datetimes.

    SQLite drops offsets on write, so values are normalized before binding
    to keep ordering by column value meaningful.
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class FileRecord(SQLModel, table=True):
    """Metadata describing one uploaded PDF.

    Fields:
    - `filename`: generated name on disk, unique inside the upload directory
    - `original_name`: the filename the client submitted
    - `path`: where the bytes were written
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    filename: str = Field(index=True, unique=True)
    original_name: str
    path: str
    size: int
    media_type: str
    upload_date: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)


class Event(SQLModel, table=True):
    """A calendar entry. `start` and `end` are not checked against each other."""
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    start: datetime = Field(sa_type=UTCDateTime, index=True)
    end: datetime = Field(sa_type=UTCDateTime)
    description: Optional[str] = None
    color: Optional[str] = None
    all_day: bool = False
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
