from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.rbac import require_admin
from rollcall.core.exceptions import ServiceError
from rollcall.db.session import get_db

from . import service
from .schemas import TeacherCreate, TeacherResponse

router = APIRouter(
    prefix="/api/v1/teachers",
    tags=["teachers"],
    dependencies=[Depends(require_admin)],
)


@router.post("", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher(
    payload: TeacherCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a teacher account that can sign in through the teacher portal."""
    try:
        return await service.create_teacher(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[TeacherResponse])
async def list_teachers(db: AsyncSession = Depends(get_db)):
    return await service.list_teachers(db)


@router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_teacher(
    teacher_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    try:
        await service.delete_teacher(db, teacher_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
