from datetime import datetime
from typing import Optional

from pydantic import Field

from nerv.schemas.base import ApiModel, PartialUpdate, RequestModel


class CourseCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=255)


class CourseUpdate(PartialUpdate):
    required_when_sent = ("title",)

    title: Optional[str] = Field(None, min_length=1, max_length=255)


class CourseRead(ApiModel):
    id: str
    user_id: str
    title: str
    created_at: datetime
