from datetime import date as date_type
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from rollcall.core.enums import AttendanceStatus


class RosterEntry(BaseModel):
    student_id: UUID
    name: str
    roll_number: Optional[str] = None
    # Pre-selected on the marking form
    status: AttendanceStatus = AttendanceStatus.PRESENT


class SessionRecordIn(BaseModel):
    student_id: UUID
    status: AttendanceStatus = AttendanceStatus.PRESENT


class SessionCreate(BaseModel):
    """One class session: a date (today when omitted) and a status per student."""

    date: Optional[date_type] = None
    records: List[SessionRecordIn] = Field(..., min_length=1)


class SessionResponse(BaseModel):
    subject_id: UUID
    date: date_type
    marked: int
    present: int
    absent: int


class DateRecordItem(BaseModel):
    student_id: UUID
    roll_number: Optional[str] = None
    name: str
    status: AttendanceStatus
