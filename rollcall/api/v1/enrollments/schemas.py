from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class EnrollmentCreate(BaseModel):
    student_id: UUID
    subject_id: UUID


class EnrollmentResponse(BaseModel):
    id: UUID
    student_id: UUID
    student_name: Optional[str] = None
    roll_number: Optional[str] = None
    subject_id: UUID
    subject_name: Optional[str] = None
    created_at: datetime
