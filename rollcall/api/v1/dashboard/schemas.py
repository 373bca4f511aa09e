from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from rollcall.api.v1.subjects.schemas import TeacherSubjectItem
from rollcall.core.stats import DailyRate, GlobalStats, SubjectStats, TrendSeries


class StudentProfile(BaseModel):
    id: UUID
    name: str
    email: str
    roll_number: Optional[str] = None
    year: Optional[int] = None


class StudentDashboard(BaseModel):
    student: StudentProfile
    subjects: List[SubjectStats]
    # "global" is a Python keyword
    global_stats: GlobalStats = Field(..., alias="global")
    trend: TrendSeries

    class Config:
        populate_by_name = True


class TeacherProfile(BaseModel):
    id: UUID
    name: str
    email: str


class TeacherDashboard(BaseModel):
    teacher: TeacherProfile
    subjects: List[TeacherSubjectItem]


class AdminDashboard(BaseModel):
    total_students: int
    total_teachers: int
    total_subjects: int
    # Every attendance row counts as one class held
    total_classes_held: int
    average_attendance: float
    daily_rates: List[DailyRate]
