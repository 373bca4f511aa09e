import logging

from fastapi import Depends, HTTPException, status

from rollcall.auth.dependencies import get_current_user
from rollcall.auth.schemas import CurrentUser
from rollcall.core.enums import Role

logger = logging.getLogger(__name__)


def require_roles(*roles: Role):
    """
    Dependency factory that admits only callers holding one of ``roles``.

    Example:
        current_user: CurrentUser = Depends(require_roles(Role.ADMIN))
    """
    allowed = set(roles)

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            logger.warning(
                "Forbidden: user %s with role %s needs one of %s",
                current_user.id,
                current_user.role.value,
                ", ".join(sorted(r.value for r in allowed)),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _checker


require_admin = require_roles(Role.ADMIN)
require_teacher = require_roles(Role.TEACHER)
require_student = require_roles(Role.STUDENT)
require_staff = require_roles(Role.ADMIN, Role.TEACHER)
