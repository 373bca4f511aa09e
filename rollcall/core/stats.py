"""
Attendance statistics under the 75% attendance policy.

All functions are pure: they take already-fetched enrollments and attendance
records and recompute everything on each call. Records only need ``subject_id``,
``date`` and ``status`` attributes, so ORM rows and schema objects both work.
"""

import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from pydantic import BaseModel

from rollcall.core.enums import AttendanceStatus, StatusTier

ATTENDANCE_THRESHOLD = 0.75

MESSAGE_NO_RECORDS = "no attendance recorded yet"


class EnrolledSubject(BaseModel):
    subject_id: UUID
    subject_name: str


class SubjectStats(BaseModel):
    subject_id: UUID
    subject_name: str
    total_classes: int
    attended_classes: int
    percentage: float
    advisory_message: str
    status_tier: StatusTier


class GlobalStats(BaseModel):
    total_subjects: int
    total_classes_held: int
    total_classes_attended: int
    overall_percentage: float


class TrendDataset(BaseModel):
    subject_id: UUID
    subject_name: str
    # 1 = Present, 0 = Absent, None = no class that day
    values: List[Optional[int]]


class TrendSeries(BaseModel):
    labels: List[date]
    datasets: List[TrendDataset]


class DateSummary(BaseModel):
    date: date
    total_present: int
    total_absent: int


class DailyRate(BaseModel):
    date: date
    percentage: float


def _is_present(status) -> bool:
    return status == AttendanceStatus.PRESENT


def _as_enrolled(enrollments: Iterable) -> List[EnrolledSubject]:
    out: List[EnrolledSubject] = []
    for e in enrollments:
        if isinstance(e, EnrolledSubject):
            out.append(e)
        else:
            subject_id, subject_name = e
            out.append(EnrolledSubject(subject_id=subject_id, subject_name=subject_name))
    return out


def percentage_of(attended: int, total: int) -> float:
    if total == 0:
        return 0.0
    return (attended / total) * 100


def advise(total: int, attended: int) -> Tuple[float, str, StatusTier]:
    """Percentage, advisory message and tier for one subject.

    Shortfall rounds up and surplus rounds down so that following the advice
    never leaves the student under the threshold. Values are not clamped.
    """
    percentage = percentage_of(attended, total)
    if total == 0:
        return percentage, MESSAGE_NO_RECORDS, StatusTier.NEUTRAL
    if percentage < ATTENDANCE_THRESHOLD * 100:
        required = math.ceil(ATTENDANCE_THRESHOLD * total - attended)
        return percentage, f"need {required} more classes to reach 75%", StatusTier.WARNING
    safe = math.floor(attended - ATTENDANCE_THRESHOLD * total)
    return percentage, f"can skip {safe} classes safely", StatusTier.OK


def compute_subject_stats(enrollments: Iterable, records: Iterable) -> List[SubjectStats]:
    """Per-subject statistics in enrollment order.

    ``enrollments`` holds ``EnrolledSubject`` items or ``(subject_id, name)``
    pairs. Records for subjects outside the enrollment set are ignored;
    duplicate records are simply counted.
    """
    subjects = _as_enrolled(enrollments)
    totals: Dict[UUID, int] = defaultdict(int)
    attended: Dict[UUID, int] = defaultdict(int)
    for rec in records:
        totals[rec.subject_id] += 1
        if _is_present(rec.status):
            attended[rec.subject_id] += 1

    result: List[SubjectStats] = []
    for s in subjects:
        total = totals.get(s.subject_id, 0)
        present = attended.get(s.subject_id, 0)
        percentage, message, tier = advise(total, present)
        result.append(SubjectStats(
            subject_id=s.subject_id,
            subject_name=s.subject_name,
            total_classes=total,
            attended_classes=present,
            percentage=percentage,
            advisory_message=message,
            status_tier=tier,
        ))
    return result


def compute_global_stats(subject_stats: Sequence[SubjectStats]) -> GlobalStats:
    held = sum(s.total_classes for s in subject_stats)
    attended = sum(s.attended_classes for s in subject_stats)
    return GlobalStats(
        total_subjects=len(subject_stats),
        total_classes_held=held,
        total_classes_attended=attended,
        overall_percentage=percentage_of(attended, held),
    )


def build_trend_series(enrollments: Iterable, records: Iterable) -> TrendSeries:
    """Per-subject 1/0 series over every date that has any record.

    A subject with no record on a date gets ``None`` there, never 0.
    """
    subjects = _as_enrolled(enrollments)
    records = list(records)
    labels = sorted({rec.date for rec in records})

    # First record wins for duplicate (subject, date) pairs
    lookup: Dict[Tuple[UUID, date], int] = {}
    for rec in records:
        key = (rec.subject_id, rec.date)
        if key not in lookup:
            lookup[key] = 1 if _is_present(rec.status) else 0

    datasets = [
        TrendDataset(
            subject_id=s.subject_id,
            subject_name=s.subject_name,
            values=[lookup.get((s.subject_id, d)) for d in labels],
        )
        for s in subjects
    ]
    return TrendSeries(labels=labels, datasets=datasets)


def summarize_by_date(records: Iterable) -> List[DateSummary]:
    """Present/absent counts per date, most recent date first."""
    present: Dict[date, int] = defaultdict(int)
    absent: Dict[date, int] = defaultdict(int)
    for rec in records:
        if _is_present(rec.status):
            present[rec.date] += 1
        else:
            absent[rec.date] += 1
    dates = sorted(set(present) | set(absent), reverse=True)
    return [
        DateSummary(date=d, total_present=present.get(d, 0), total_absent=absent.get(d, 0))
        for d in dates
    ]


def daily_attendance_rates(records: Iterable) -> List[DailyRate]:
    """Share of present records per date across all subjects, oldest first."""
    summaries = summarize_by_date(records)
    return [
        DailyRate(
            date=s.date,
            percentage=percentage_of(s.total_present, s.total_present + s.total_absent),
        )
        for s in reversed(summaries)
    ]
