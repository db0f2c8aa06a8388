from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from nerv.schemas.base import ApiModel, PartialUpdate, RequestModel


class NoteCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    course: Optional[str] = Field(None, max_length=255)
    link: Optional[str] = Field(None, max_length=2048)

    @field_validator("course", "link")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class NoteUpdate(PartialUpdate):
    required_when_sent = ("title", "content")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    course: Optional[str] = Field(None, max_length=255)
    link: Optional[str] = Field(None, max_length=2048)

    @field_validator("course", "link")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class NoteRead(ApiModel):
    id: str
    user_id: str
    course: Optional[str] = None
    title: str
    content: str
    link: Optional[str] = None
    created_at: datetime
