from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from rollcall.core.enums import LeaveStatus


class LeaveApply(BaseModel):
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1)


class LeaveReview(BaseModel):
    status: LeaveStatus
    note: Optional[str] = None


class LeaveResponse(BaseModel):
    id: UUID
    student_id: UUID
    student_name: Optional[str] = None
    roll_number: Optional[str] = None
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    teacher_note: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
