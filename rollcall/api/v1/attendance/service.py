"""Class sessions: roster, marking and per-subject history."""

import logging
from datetime import date
from typing import List, Sequence
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rollcall.api.v1.enrollments.service import list_enrolled_students
from rollcall.core.enums import AttendanceStatus
from rollcall.core.exceptions import ConflictError, ServiceError
from rollcall.core.models import AttendanceRecord, Subject
from rollcall.core.relations import single_related
from rollcall.core.stats import DateSummary, summarize_by_date

from .export import SheetRow
from .schemas import DateRecordItem, RosterEntry, SessionCreate, SessionResponse

logger = logging.getLogger(__name__)


async def get_roster(db: AsyncSession, subject: Subject) -> List[RosterEntry]:
    students = await list_enrolled_students(db, subject.id)
    return [
        RosterEntry(student_id=s.id, name=s.full_name, roll_number=s.roll_number)
        for s in students
    ]


async def mark_session(
    db: AsyncSession,
    subject: Subject,
    marked_by: UUID,
    payload: SessionCreate,
) -> SessionResponse:
    """
    Insert one record per student for the session date.

    The whole session is rejected if the date is in the future, a student is
    not enrolled, or any of the students already has a record for that date.
    """
    att_date = payload.date or date.today()
    if att_date > date.today():
        raise ServiceError("Cannot mark attendance for a future date", status.HTTP_400_BAD_REQUEST)

    student_ids = [r.student_id for r in payload.records]
    if len(set(student_ids)) != len(student_ids):
        raise ServiceError("Each student may appear only once per session", status.HTTP_400_BAD_REQUEST)

    enrolled = {s.id for s in await list_enrolled_students(db, subject.id)}
    not_enrolled = [sid for sid in student_ids if sid not in enrolled]
    if not_enrolled:
        raise ServiceError(
            f"Student {not_enrolled[0]} is not enrolled in this subject",
            status.HTTP_400_BAD_REQUEST,
        )

    existing = await db.execute(
        select(AttendanceRecord.id).where(
            AttendanceRecord.subject_id == subject.id,
            AttendanceRecord.date == att_date,
            AttendanceRecord.student_id.in_(student_ids),
        ).limit(1)
    )
    if existing.scalar_one_or_none():
        raise ConflictError(f"Attendance already marked for {att_date.isoformat()}")

    for r in payload.records:
        db.add(AttendanceRecord(
            subject_id=subject.id,
            student_id=r.student_id,
            date=att_date,
            status=r.status.value,
            marked_by=marked_by,
        ))
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(f"Attendance already marked for {att_date.isoformat()}") from e

    present = sum(1 for r in payload.records if r.status == AttendanceStatus.PRESENT)
    logger.info(
        "Marked attendance for subject %s on %s: %d present, %d absent",
        subject.id, att_date, present, len(payload.records) - present,
    )
    return SessionResponse(
        subject_id=subject.id,
        date=att_date,
        marked=len(payload.records),
        present=present,
        absent=len(payload.records) - present,
    )


async def list_subject_records(db: AsyncSession, subject_id: UUID) -> Sequence[AttendanceRecord]:
    result = await db.execute(
        select(AttendanceRecord).where(AttendanceRecord.subject_id == subject_id)
    )
    return result.scalars().all()


async def list_student_records(db: AsyncSession, student_id: UUID) -> Sequence[AttendanceRecord]:
    """All of a student's records in insertion order."""
    result = await db.execute(
        select(AttendanceRecord)
        .where(AttendanceRecord.student_id == student_id)
        .order_by(AttendanceRecord.created_at, AttendanceRecord.date)
    )
    return result.scalars().all()


async def get_history(db: AsyncSession, subject_id: UUID) -> List[DateSummary]:
    return summarize_by_date(await list_subject_records(db, subject_id))


async def _records_with_students(db: AsyncSession, *criteria) -> Sequence[AttendanceRecord]:
    result = await db.execute(
        select(AttendanceRecord)
        .options(selectinload(AttendanceRecord.student))
        .where(*criteria)
    )
    return result.scalars().all()


async def get_records_for_date(
    db: AsyncSession,
    subject_id: UUID,
    att_date: date,
) -> List[DateRecordItem]:
    records = await _records_with_students(
        db,
        AttendanceRecord.subject_id == subject_id,
        AttendanceRecord.date == att_date,
    )
    items = []
    for rec in records:
        student = single_related(rec.student)
        items.append(DateRecordItem(
            student_id=rec.student_id,
            roll_number=student.roll_number if student else None,
            name=student.full_name if student else "",
            status=rec.status,
        ))
    return sorted(items, key=lambda i: (i.roll_number or "", i.name))


async def get_export_rows(db: AsyncSession, subject_id: UUID) -> List[SheetRow]:
    """Sheet rows newest date first, then by roll number."""
    records = await _records_with_students(db, AttendanceRecord.subject_id == subject_id)
    rows: List[SheetRow] = []
    for rec in records:
        student = single_related(rec.student)
        rows.append((
            rec.date,
            student.roll_number if student else None,
            student.full_name if student else "",
            rec.status,
        ))
    rows.sort(key=lambda r: (r[1] or "", r[2]))
    rows.sort(key=lambda r: r[0], reverse=True)
    return rows
