from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.rbac import require_admin, require_student, require_teacher
from rollcall.auth.schemas import CurrentUser
from rollcall.core.exceptions import ServiceError
from rollcall.db.session import get_db

from . import service
from .schemas import AdminDashboard, StudentDashboard, TeacherDashboard

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/student", response_model=StudentDashboard)
async def student_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
):
    """Per-subject stats with 75% advice, overall totals and the day-by-day trend."""
    try:
        return await service.get_student_dashboard(db, current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/teacher", response_model=TeacherDashboard)
async def teacher_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_teacher),
):
    try:
        return await service.get_teacher_dashboard(db, current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/admin", response_model=AdminDashboard, dependencies=[Depends(require_admin)])
async def admin_dashboard(db: AsyncSession = Depends(get_db)):
    return await service.get_admin_dashboard(db)
