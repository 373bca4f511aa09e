import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from rollcall.db.session import Base


class User(Base):
    """Account for an admin, teacher or student. Role decides what the account can reach."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    # ADMIN, TEACHER or STUDENT
    role = Column(String(20), nullable=False)
    # Students only
    roll_number = Column(String(50), nullable=True)
    year = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    subjects_taught = relationship("Subject", back_populates="teacher")
    enrollments = relationship(
        "Enrollment", back_populates="student", cascade="all, delete-orphan"
    )
    attendance_records = relationship(
        "AttendanceRecord",
        back_populates="student",
        cascade="all, delete-orphan",
        foreign_keys="AttendanceRecord.student_id",
    )
    leave_requests = relationship(
        "LeaveRequest",
        back_populates="student",
        cascade="all, delete-orphan",
        foreign_keys="LeaveRequest.student_id",
    )
