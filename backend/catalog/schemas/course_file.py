from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CourseFileCreate(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    url: str | None = Field(default=None, max_length=2048)
    course: str | None = Field(default=None, max_length=255)

    @field_validator("title", "url", "course")
    @classmethod
    def _strip_strings(cls, v: str | None) -> str | None:
        v = (v or "").strip()
        return v or None

    def is_complete(self) -> bool:
        return bool(self.title and self.url and self.course)


class CourseFilePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    url: str
    course: str
    created_at: datetime
