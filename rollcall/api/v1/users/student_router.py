from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.rbac import require_admin
from rollcall.core.exceptions import ServiceError
from rollcall.db.session import get_db

from . import service
from .schemas import StudentCreate, StudentResponse

router = APIRouter(
    prefix="/api/v1/students",
    tags=["students"],
    dependencies=[Depends(require_admin)],
)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a student account. Roll number is used for ordering and exports."""
    try:
        return await service.create_student(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[StudentResponse])
async def list_students(db: AsyncSession = Depends(get_db)):
    return await service.list_students(db)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a student and everything recorded for them."""
    try:
        await service.delete_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
