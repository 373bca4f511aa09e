from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.rbac import require_staff, require_student
from rollcall.auth.schemas import CurrentUser
from rollcall.core.enums import LeaveStatus
from rollcall.core.exceptions import ServiceError
from rollcall.db.session import get_db

from .schemas import LeaveApply, LeaveResponse, LeaveReview
from . import service

router = APIRouter(prefix="/api/v1/leaves", tags=["leaves"])


@router.post("", response_model=LeaveResponse, status_code=status.HTTP_201_CREATED)
async def apply_leave(
    payload: LeaveApply,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
):
    """Apply for leave. The request starts as Pending."""
    try:
        return await service.apply_leave(db, current_user.id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/mine", response_model=List[LeaveResponse])
async def list_my_leaves(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
):
    return await service.list_my_leaves(db, current_user.id)


@router.get("", response_model=List[LeaveResponse], dependencies=[Depends(require_staff)])
async def list_leaves(
    search: Optional[str] = Query(None, description="Student name or roll number"),
    status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """All students' leave requests, newest first. Omit ``status`` for all statuses."""
    return await service.list_leaves(db, search=search, status_filter=status_filter)


@router.patch("/{leave_id}", response_model=LeaveResponse)
async def review_leave(
    leave_id: UUID,
    payload: LeaveReview,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_staff),
):
    """Approve or reject a leave request, with an optional note for the student."""
    try:
        return await service.review_leave(db, leave_id, current_user.id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
