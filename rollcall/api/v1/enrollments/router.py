from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.rbac import require_admin
from rollcall.core.exceptions import ServiceError
from rollcall.db.session import get_db

from . import service
from .schemas import EnrollmentCreate, EnrollmentResponse

router = APIRouter(
    prefix="/api/v1/enrollments",
    tags=["enrollments"],
    dependencies=[Depends(require_admin)],
)


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    payload: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Enroll a student in a subject."""
    try:
        return await service.create_enrollment(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[EnrollmentResponse])
async def list_enrollments(db: AsyncSession = Depends(get_db)):
    return await service.list_enrollments(db)


@router.delete("/{enrollment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_enrollment(
    enrollment_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    try:
        await service.delete_enrollment(db, enrollment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
