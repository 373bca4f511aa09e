"""Dashboards. Every figure is recomputed from the stored records on each call."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.api.v1.attendance.service import list_student_records
from rollcall.api.v1.enrollments.service import list_enrolled_subjects
from rollcall.api.v1.subjects.service import list_teacher_subjects
from rollcall.api.v1.users.service import get_user_with_role
from rollcall.core.enums import AttendanceStatus, Role
from rollcall.core.models import AttendanceRecord, Subject, User
from rollcall.core.stats import (
    build_trend_series,
    compute_global_stats,
    compute_subject_stats,
    daily_attendance_rates,
    percentage_of,
)

from .schemas import (
    AdminDashboard,
    StudentDashboard,
    StudentProfile,
    TeacherDashboard,
    TeacherProfile,
)


async def get_student_dashboard(db: AsyncSession, student_id: UUID) -> StudentDashboard:
    student = await get_user_with_role(db, student_id, Role.STUDENT)
    enrollments = await list_enrolled_subjects(db, student_id)
    records = await list_student_records(db, student_id)

    subject_stats = compute_subject_stats(enrollments, records)
    return StudentDashboard(
        student=StudentProfile(
            id=student.id,
            name=student.full_name,
            email=student.email,
            roll_number=student.roll_number,
            year=student.year,
        ),
        subjects=subject_stats,
        global_stats=compute_global_stats(subject_stats),
        trend=build_trend_series(enrollments, records),
    )


async def get_teacher_dashboard(db: AsyncSession, teacher_id: UUID) -> TeacherDashboard:
    teacher = await get_user_with_role(db, teacher_id, Role.TEACHER)
    return TeacherDashboard(
        teacher=TeacherProfile(id=teacher.id, name=teacher.full_name, email=teacher.email),
        subjects=await list_teacher_subjects(db, teacher_id),
    )


async def _count_users(db: AsyncSession, role: Role) -> int:
    result = await db.execute(select(func.count(User.id)).where(User.role == role.value))
    return result.scalar_one()


async def get_admin_dashboard(db: AsyncSession) -> AdminDashboard:
    total_subjects = (await db.execute(select(func.count(Subject.id)))).scalar_one()
    records = (await db.execute(
        select(AttendanceRecord.date, AttendanceRecord.status)
    )).all()
    present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
    return AdminDashboard(
        total_students=await _count_users(db, Role.STUDENT),
        total_teachers=await _count_users(db, Role.TEACHER),
        total_subjects=total_subjects,
        total_classes_held=len(records),
        average_attendance=percentage_of(present, len(records)),
        daily_rates=daily_attendance_rates(records),
    )
