import logging
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rollcall.auth.models import User
from rollcall.core.enums import LeaveStatus
from rollcall.core.exceptions import NotFoundError, ServiceError
from rollcall.core.models import LeaveRequest
from rollcall.core.relations import single_related

from .schemas import LeaveApply, LeaveResponse, LeaveReview

logger = logging.getLogger(__name__)


def _to_response(obj: LeaveRequest) -> LeaveResponse:
    student = single_related(obj.student)
    return LeaveResponse(
        id=obj.id,
        student_id=obj.student_id,
        student_name=student.full_name if student else None,
        roll_number=student.roll_number if student else None,
        start_date=obj.start_date,
        end_date=obj.end_date,
        reason=obj.reason,
        status=obj.status,
        teacher_note=obj.teacher_note,
        reviewed_by=obj.reviewed_by,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


def _select_leaves():
    return (
        select(LeaveRequest)
        .options(selectinload(LeaveRequest.student))
        .order_by(LeaveRequest.created_at.desc())
    )


async def _get_leave(db: AsyncSession, leave_id: UUID) -> LeaveRequest:
    result = await db.execute(
        _select_leaves()
        .where(LeaveRequest.id == leave_id)
        .execution_options(populate_existing=True)
    )
    obj = result.scalar_one_or_none()
    if not obj:
        raise NotFoundError("Leave request not found")
    return obj


async def apply_leave(db: AsyncSession, student_id: UUID, payload: LeaveApply) -> LeaveResponse:
    if payload.end_date < payload.start_date:
        raise ServiceError("End date cannot be before start date", status.HTTP_400_BAD_REQUEST)
    reason = payload.reason.strip()
    if not reason:
        raise ServiceError("Reason is required", status.HTTP_400_BAD_REQUEST)
    obj = LeaveRequest(
        student_id=student_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=reason,
        status=LeaveStatus.PENDING.value,
    )
    db.add(obj)
    await db.commit()
    logger.info("Student %s applied for leave %s", student_id, obj.id)
    return _to_response(await _get_leave(db, obj.id))


async def list_my_leaves(db: AsyncSession, student_id: UUID) -> List[LeaveResponse]:
    result = await db.execute(_select_leaves().where(LeaveRequest.student_id == student_id))
    return [_to_response(obj) for obj in result.scalars().all()]


async def list_leaves(
    db: AsyncSession,
    search: Optional[str] = None,
    status_filter: Optional[LeaveStatus] = None,
) -> List[LeaveResponse]:
    """
    Leave requests newest first, for teacher and admin review.

    ``search`` matches student name or roll number, case-insensitively.
    """
    stmt = _select_leaves()
    term = (search or "").strip()
    if term:
        pattern = f"%{term}%"
        stmt = stmt.join(User, User.id == LeaveRequest.student_id).where(
            or_(User.full_name.ilike(pattern), User.roll_number.ilike(pattern))
        )
    if status_filter is not None:
        stmt = stmt.where(LeaveRequest.status == status_filter.value)
    result = await db.execute(stmt)
    return [_to_response(obj) for obj in result.scalars().all()]


async def review_leave(
    db: AsyncSession,
    leave_id: UUID,
    reviewer_id: UUID,
    payload: LeaveReview,
) -> LeaveResponse:
    obj = await _get_leave(db, leave_id)
    obj.status = payload.status.value
    obj.teacher_note = payload.note
    obj.reviewed_by = reviewer_id
    await db.commit()
    logger.info("Leave %s set to %s by %s", leave_id, payload.status.value, reviewer_id)
    return _to_response(await _get_leave(db, leave_id))
