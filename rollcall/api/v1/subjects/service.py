import logging
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rollcall.auth.models import User
from rollcall.auth.schemas import CurrentUser
from rollcall.core.enums import Role
from rollcall.core.exceptions import ForbiddenError, NotFoundError, ServiceError
from rollcall.core.models import Enrollment, Subject
from rollcall.core.relations import single_related

from .schemas import SubjectCreate, SubjectResponse, TeacherSubjectItem

logger = logging.getLogger(__name__)


def _to_response(s: Subject) -> SubjectResponse:
    teacher = single_related(s.teacher)
    return SubjectResponse(
        id=s.id,
        name=s.name,
        teacher_id=s.teacher_id,
        teacher_name=teacher.full_name if teacher else None,
        created_at=s.created_at,
    )


async def get_subject(db: AsyncSession, subject_id: UUID) -> Optional[Subject]:
    result = await db.execute(
        select(Subject)
        .options(selectinload(Subject.teacher))
        .where(Subject.id == subject_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_subject_for_user(
    db: AsyncSession,
    subject_id: UUID,
    current_user: CurrentUser,
) -> Subject:
    """Load a subject the caller may manage. Admin: any; Teacher: only subjects they teach."""
    subject = await get_subject(db, subject_id)
    if not subject:
        raise NotFoundError("Subject not found")
    if current_user.role == Role.TEACHER and subject.teacher_id != current_user.id:
        logger.warning("Teacher %s denied access to subject %s", current_user.id, subject_id)
        raise ForbiddenError("You do not teach this subject")
    return subject


async def create_subject(db: AsyncSession, payload: SubjectCreate) -> SubjectResponse:
    if payload.teacher_id is not None:
        teacher = await db.get(User, payload.teacher_id)
        if not teacher or teacher.role != Role.TEACHER.value:
            raise ServiceError("Invalid teacher", status.HTTP_400_BAD_REQUEST)
    obj = Subject(name=payload.name.strip(), teacher_id=payload.teacher_id)
    db.add(obj)
    await db.commit()
    logger.info("Created subject %s", obj.id)
    return _to_response(await get_subject(db, obj.id))


async def list_subjects(db: AsyncSession) -> List[SubjectResponse]:
    result = await db.execute(
        select(Subject).options(selectinload(Subject.teacher)).order_by(Subject.name)
    )
    return [_to_response(s) for s in result.scalars().all()]


async def list_teacher_subjects(db: AsyncSession, teacher_id: UUID) -> List[TeacherSubjectItem]:
    """Subjects taught by one teacher with their enrollment counts."""
    stmt = (
        select(Subject.id, Subject.name, func.count(Enrollment.id))
        .outerjoin(Enrollment, Enrollment.subject_id == Subject.id)
        .where(Subject.teacher_id == teacher_id)
        .group_by(Subject.id, Subject.name)
        .order_by(Subject.name)
    )
    result = await db.execute(stmt)
    return [
        TeacherSubjectItem(id=sid, name=name, enrolled_students=count)
        for sid, name, count in result.all()
    ]


async def delete_subject(db: AsyncSession, subject_id: UUID) -> None:
    """Delete a subject with its enrollments and attendance."""
    subject = await db.get(Subject, subject_id)
    if not subject:
        raise NotFoundError("Subject not found")
    await db.delete(subject)
    await db.commit()
    logger.info("Deleted subject %s", subject_id)
