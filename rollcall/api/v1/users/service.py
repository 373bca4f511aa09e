"""Admin-managed teacher and student accounts."""

import logging
from typing import List
from uuid import UUID

from fastapi import status
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.models import User
from rollcall.auth.security import hash_password
from rollcall.core.enums import Role
from rollcall.core.exceptions import ConflictError, NotFoundError, ServiceError
from rollcall.core.models import AttendanceRecord, Enrollment, LeaveRequest, Subject

from .schemas import StudentCreate, StudentResponse, TeacherCreate, TeacherResponse

logger = logging.getLogger(__name__)


def _teacher_response(u: User) -> TeacherResponse:
    return TeacherResponse(id=u.id, name=u.full_name, email=u.email, created_at=u.created_at)


def _student_response(u: User) -> StudentResponse:
    return StudentResponse(
        id=u.id,
        name=u.full_name,
        email=u.email,
        roll_number=u.roll_number,
        year=u.year,
        created_at=u.created_at,
    )


async def _ensure_email_free(db: AsyncSession, email: str) -> None:
    result = await db.execute(
        select(User.id).where(func.lower(User.email) == email.lower())
    )
    if result.scalar_one_or_none():
        raise ConflictError("Email is already in use")


async def get_user_with_role(db: AsyncSession, user_id: UUID, role: Role) -> User:
    user = await db.get(User, user_id)
    if not user or user.role != role.value:
        raise NotFoundError(f"{role.value.title()} not found")
    return user


async def _add_user(db: AsyncSession, user: User) -> User:
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ServiceError("Email is already in use", status.HTTP_409_CONFLICT) from e
    await db.refresh(user)
    logger.info("Created %s account %s", user.role, user.id)
    return user


# ----- Teachers -----
async def create_teacher(db: AsyncSession, payload: TeacherCreate) -> TeacherResponse:
    await _ensure_email_free(db, payload.email)
    user = User(
        full_name=payload.name.strip(),
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=Role.TEACHER.value,
    )
    return _teacher_response(await _add_user(db, user))


async def list_teachers(db: AsyncSession) -> List[TeacherResponse]:
    result = await db.execute(
        select(User).where(User.role == Role.TEACHER.value).order_by(User.full_name)
    )
    return [_teacher_response(u) for u in result.scalars().all()]


async def delete_teacher(db: AsyncSession, teacher_id: UUID) -> None:
    """Delete a teacher; their subjects stay but lose the teacher assignment."""
    teacher = await get_user_with_role(db, teacher_id, Role.TEACHER)
    await db.execute(
        update(Subject).where(Subject.teacher_id == teacher_id).values(teacher_id=None)
    )
    await db.delete(teacher)
    await db.commit()
    logger.info("Deleted teacher %s", teacher_id)


# ----- Students -----
async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    await _ensure_email_free(db, payload.email)
    user = User(
        full_name=payload.name.strip(),
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=Role.STUDENT.value,
        roll_number=payload.roll_number.strip(),
        year=payload.year,
    )
    return _student_response(await _add_user(db, user))


async def list_students(db: AsyncSession) -> List[StudentResponse]:
    result = await db.execute(
        select(User).where(User.role == Role.STUDENT.value).order_by(User.roll_number)
    )
    return [_student_response(u) for u in result.scalars().all()]


async def delete_student(db: AsyncSession, student_id: UUID) -> None:
    """Delete a student together with their enrollments, attendance and leaves."""
    student = await get_user_with_role(db, student_id, Role.STUDENT)
    await db.execute(delete(Enrollment).where(Enrollment.student_id == student_id))
    await db.execute(delete(AttendanceRecord).where(AttendanceRecord.student_id == student_id))
    await db.execute(delete(LeaveRequest).where(LeaveRequest.student_id == student_id))
    await db.delete(student)
    await db.commit()
    logger.info("Deleted student %s", student_id)
