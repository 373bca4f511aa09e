"""Attendance API router. Admin: any subject; Teacher: subjects they teach."""

from datetime import date
from typing import List
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.api.v1.subjects.service import get_subject_for_user
from rollcall.auth.rbac import require_staff
from rollcall.auth.schemas import CurrentUser
from rollcall.core.exceptions import ServiceError
from rollcall.core.models import Subject
from rollcall.core.stats import DateSummary
from rollcall.db.session import get_db

from . import export, service
from .schemas import DateRecordItem, RosterEntry, SessionCreate, SessionResponse

router = APIRouter(prefix="/api/v1/attendance", tags=["attendance"])


async def _managed_subject(
    subject_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_staff),
) -> Subject:
    try:
        return await get_subject_for_user(db, subject_id, current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


def _content_disposition(subject: Subject, ext: str) -> str:
    """Attachment header. Headers are latin-1, so the plain filename is ASCII
    and the real subject name goes in the RFC 5987 ``filename*`` parameter."""
    slug = "".join(c if c.isascii() and c.isalnum() else "_" for c in subject.name).strip("_") or "subject"
    utf8_name = quote(f"attendance_{subject.name}.{ext}", safe="")
    return f"attachment; filename=attendance_{slug}.{ext}; filename*=UTF-8''{utf8_name}"


@router.get("/subjects/{subject_id}/roster", response_model=List[RosterEntry])
async def get_roster(
    subject: Subject = Depends(_managed_subject),
    db: AsyncSession = Depends(get_db),
):
    """Enrolled students by roll number, each defaulting to Present."""
    return await service.get_roster(db, subject)


@router.post(
    "/subjects/{subject_id}/sessions",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def mark_session(
    payload: SessionCreate,
    subject: Subject = Depends(_managed_subject),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_staff),
):
    try:
        return await service.mark_session(db, subject, current_user.id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/subjects/{subject_id}/history", response_model=List[DateSummary])
async def get_history(
    subject: Subject = Depends(_managed_subject),
    db: AsyncSession = Depends(get_db),
):
    """Present and absent counts per date, most recent first."""
    return await service.get_history(db, subject.id)


@router.get("/subjects/{subject_id}/history/{att_date}", response_model=List[DateRecordItem])
async def get_history_for_date(
    att_date: date,
    subject: Subject = Depends(_managed_subject),
    db: AsyncSession = Depends(get_db),
):
    return await service.get_records_for_date(db, subject.id, att_date)


@router.get("/subjects/{subject_id}/export.xlsx")
async def export_xlsx(
    subject: Subject = Depends(_managed_subject),
    db: AsyncSession = Depends(get_db),
) -> Response:
    rows = await service.get_export_rows(db, subject.id)
    return Response(
        content=export.build_attendance_xlsx(rows),
        media_type=export.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": _content_disposition(subject, "xlsx")},
    )


@router.get("/subjects/{subject_id}/export.pdf")
async def export_pdf(
    subject: Subject = Depends(_managed_subject),
    db: AsyncSession = Depends(get_db),
) -> Response:
    summaries = await service.get_history(db, subject.id)
    return Response(
        content=export.build_summary_pdf(subject.name, summaries),
        media_type=export.PDF_MEDIA_TYPE,
        headers={"Content-Disposition": _content_disposition(subject, "pdf")},
    )
