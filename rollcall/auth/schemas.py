from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr

from rollcall.core.enums import Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    # Portal the user is signing in through; a role mismatch is rejected
    portal: Optional[Role] = None


class UserInfo(BaseModel):
    id: UUID
    name: str
    email: EmailStr
    role: Role


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo


class CurrentUser(BaseModel):
    """Identity resolved once per request from the bearer token."""

    id: UUID
    email: str
    name: str
    role: Role
