import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.models import User
from rollcall.auth.schemas import LoginRequest, LoginResponse, UserInfo
from rollcall.auth.security import create_access_token, verify_password
from rollcall.core.enums import Role
from rollcall.core.exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

_PORTAL_NAMES = {
    Role.ADMIN: "admin",
    Role.TEACHER: "teacher",
    Role.STUDENT: "student",
}


def _check_portal(user_role: Role, portal: Optional[Role]) -> None:
    """Reject sign-in through a portal that does not match the user's role."""
    if portal is None or portal == user_role:
        return
    if user_role == Role.ADMIN:
        raise ForbiddenError("You are an Admin. Please use Admin Login.")
    if portal == Role.ADMIN:
        raise ForbiddenError("You are not an admin.")
    raise ForbiddenError(f"You are not registered as a {_PORTAL_NAMES[portal]}.")


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    # 1. Find user by email (case-insensitive)
    result = await db.execute(
        select(User).where(func.lower(User.email) == func.lower(payload.email))
    )
    user: Optional[User] = result.scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise UnauthorizedError("Invalid credentials")

    role = Role(user.role)
    _check_portal(role, payload.portal)

    # 2. Issue access token
    access_token = create_access_token(
        subject={
            "sub": str(user.id),
            "role": role.value,
        }
    )
    logger.info("User %s signed in as %s", user.id, role.value)
    return LoginResponse(
        access_token=access_token,
        user=UserInfo(
            id=user.id,
            name=user.full_name,
            email=user.email,
            role=role,
        ),
    )
