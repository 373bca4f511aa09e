from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.rbac import require_admin, require_teacher
from rollcall.auth.schemas import CurrentUser
from rollcall.core.exceptions import ServiceError
from rollcall.db.session import get_db

from .schemas import SubjectCreate, SubjectResponse, TeacherSubjectItem
from . import service

router = APIRouter(prefix="/api/v1/subjects", tags=["subjects"])


@router.post(
    "",
    response_model=SubjectResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_subject(
    payload: SubjectCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a subject, optionally assigned to a teacher."""
    try:
        return await service.create_subject(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[SubjectResponse],
    dependencies=[Depends(require_admin)],
)
async def list_subjects(db: AsyncSession = Depends(get_db)):
    return await service.list_subjects(db)


@router.get("/mine", response_model=List[TeacherSubjectItem])
async def list_my_subjects(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_teacher),
):
    """Subjects taught by the signed-in teacher."""
    return await service.list_teacher_subjects(db, current_user.id)


@router.delete(
    "/{subject_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_subject(
    subject_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    try:
        await service.delete_subject(db, subject_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
