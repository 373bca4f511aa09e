from rollcall.auth.models import User
from rollcall.core.models.subject import Subject
from rollcall.core.models.enrollment import Enrollment
from rollcall.core.models.attendance_record import AttendanceRecord
from rollcall.core.models.leave_request import LeaveRequest

__all__ = [
    "AttendanceRecord",
    "Enrollment",
    "LeaveRequest",
    "Subject",
    "User",
]
