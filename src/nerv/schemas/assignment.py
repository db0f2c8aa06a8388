"""Pydantic schemas for assignments.

dueDate is an ISO 8601 datetime; values without an offset are taken to
be UTC. Values are normalized to UTC here, so an offset that pushes the
instant outside the representable range is a 400, not a storage error.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field, field_validator

from nerv.schemas.base import ApiModel, PartialUpdate, RequestModel

AssignmentStatus = Literal["pending", "in-progress", "completed", "archived"]


def _due_date_to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError("date is out of range once converted to UTC") from e


class AssignmentCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: datetime
    course_title: Optional[str] = Field(None, max_length=255)
    status: AssignmentStatus = "pending"

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _due_date_to_utc(value)


class AssignmentUpdate(PartialUpdate):
    required_when_sent = ("title", "due_date", "status")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    course_title: Optional[str] = Field(None, max_length=255)
    status: Optional[AssignmentStatus] = None

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _due_date_to_utc(value)


class AssignmentRead(ApiModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    due_date: datetime
    course_title: Optional[str] = None
    status: AssignmentStatus
    created_at: datetime
    updated_at: datetime
