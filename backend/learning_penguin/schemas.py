"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from .models import as_utc


class EventIn(BaseModel):
    """Payload for creating an event. Unknown fields are ignored."""
    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1)
    start: datetime
    end: datetime
    description: Optional[str] = None
    color: Optional[str] = None
    all_day: bool = False

    @field_validator("start", "end")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class EventPatch(BaseModel):
    """Partial update for an event; only fields present in the body are applied."""
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, min_length=1)
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    description: Optional[str] = None
    color: Optional[str] = None
    all_day: Optional[bool] = None

    @field_validator("title", "start", "end", "all_day")
    @classmethod
    def _not_null(cls, v, info):
        # validators only run for values that were actually sent
        if v is None:
            raise ValueError(f"{info.field_name} may not be null")
        if isinstance(v, datetime):
            return as_utc(v)
        return v


class EventOut(BaseModel):
    """Event as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    start: datetime
    end: datetime
    description: Optional[str] = None
    color: Optional[str] = None
    all_day: bool
    created_at: datetime
    updated_at: datetime


class FileRecordOut(BaseModel):
    """Uploaded file metadata as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    original_name: str
    path: str
    size: int
    media_type: str
    upload_date: datetime


class ClearItem(BaseModel):
    """Outcome for one record removed by a bulk clear."""
    id: int
    filename: str
    file_removed: bool
    error: Optional[str] = None


class ClearReport(BaseModel):
    """Response body of `DELETE /pdfs/clear`."""
    message: str
    deleted: int
    failed: int
    results: List[ClearItem]
