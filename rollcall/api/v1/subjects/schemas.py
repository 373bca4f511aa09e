from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    teacher_id: Optional[UUID] = None


class SubjectResponse(BaseModel):
    id: UUID
    name: str
    teacher_id: Optional[UUID] = None
    teacher_name: Optional[str] = None
    created_at: datetime


class TeacherSubjectItem(BaseModel):
    """Subject as listed on the teacher dashboard."""

    id: UUID
    name: str
    enrolled_students: int = 0
