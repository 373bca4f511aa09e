import logging
from typing import List
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rollcall.auth.models import User
from rollcall.core.enums import Role
from rollcall.core.exceptions import ConflictError, NotFoundError, ServiceError
from rollcall.core.models import Enrollment, Subject
from rollcall.core.relations import single_related
from rollcall.core.stats import EnrolledSubject

from .schemas import EnrollmentCreate, EnrollmentResponse

logger = logging.getLogger(__name__)


def _to_response(e: Enrollment) -> EnrollmentResponse:
    student = single_related(e.student)
    subject = single_related(e.subject)
    return EnrollmentResponse(
        id=e.id,
        student_id=e.student_id,
        student_name=student.full_name if student else None,
        roll_number=student.roll_number if student else None,
        subject_id=e.subject_id,
        subject_name=subject.name if subject else None,
        created_at=e.created_at,
    )


def _with_relations(stmt):
    return stmt.options(selectinload(Enrollment.student), selectinload(Enrollment.subject))


async def create_enrollment(db: AsyncSession, payload: EnrollmentCreate) -> EnrollmentResponse:
    student = await db.get(User, payload.student_id)
    if not student or student.role != Role.STUDENT.value:
        raise ServiceError("Invalid student", status.HTTP_400_BAD_REQUEST)
    if not await db.get(Subject, payload.subject_id):
        raise ServiceError("Invalid subject", status.HTTP_400_BAD_REQUEST)
    existing = await db.execute(
        select(Enrollment.id).where(
            Enrollment.student_id == payload.student_id,
            Enrollment.subject_id == payload.subject_id,
        )
    )
    if existing.scalar_one_or_none():
        raise ConflictError("Student is already enrolled in this subject")

    obj = Enrollment(student_id=payload.student_id, subject_id=payload.subject_id)
    db.add(obj)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("Student is already enrolled in this subject") from e
    logger.info("Enrolled student %s in subject %s", payload.student_id, payload.subject_id)

    result = await db.execute(
        _with_relations(select(Enrollment))
        .where(Enrollment.id == obj.id)
        .execution_options(populate_existing=True)
    )
    return _to_response(result.scalar_one())


async def list_enrollments(db: AsyncSession) -> List[EnrollmentResponse]:
    result = await db.execute(
        _with_relations(select(Enrollment)).order_by(Enrollment.created_at.desc())
    )
    return [_to_response(e) for e in result.scalars().all()]


async def delete_enrollment(db: AsyncSession, enrollment_id: UUID) -> None:
    obj = await db.get(Enrollment, enrollment_id)
    if not obj:
        raise NotFoundError("Enrollment not found")
    await db.delete(obj)
    await db.commit()


async def list_enrolled_subjects(db: AsyncSession, student_id: UUID) -> List[EnrolledSubject]:
    """Subjects a student is enrolled in, ordered by subject name."""
    result = await db.execute(
        select(Subject.id, Subject.name)
        .join(Enrollment, Enrollment.subject_id == Subject.id)
        .where(Enrollment.student_id == student_id)
        .order_by(Subject.name)
    )
    return [EnrolledSubject(subject_id=sid, subject_name=name) for sid, name in result.all()]


async def list_enrolled_students(db: AsyncSession, subject_id: UUID) -> List[User]:
    """Students enrolled in a subject, ordered by roll number."""
    result = await db.execute(
        select(Enrollment)
        .options(selectinload(Enrollment.student))
        .where(Enrollment.subject_id == subject_id)
    )
    students = [single_related(e.student) for e in result.scalars().all()]
    students = [s for s in students if s is not None]
    return sorted(students, key=lambda s: (s.roll_number or "", s.full_name))
