from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class TeacherCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)


class TeacherResponse(BaseModel):
    id: UUID
    name: str
    email: EmailStr
    created_at: datetime


class StudentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    roll_number: str = Field(..., min_length=1, max_length=50)
    year: int = Field(..., ge=1, le=10)
    password: str = Field(..., min_length=6)


class StudentResponse(BaseModel):
    id: UUID
    name: str
    email: EmailStr
    roll_number: Optional[str] = None
    year: Optional[int] = None
    created_at: datetime
