"""
Create or update the bootstrap ADMIN account.

Run after init_db with env set:
  ADMIN_EMAIL=admin@example.com
  ADMIN_PASSWORD=YourSecurePassword
  ADMIN_NAME=Administrator   (optional)
"""
import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.auth.models import User
from rollcall.auth.security import hash_password
from rollcall.core.config import settings
from rollcall.core.enums import Role
from rollcall.core.logging import configure_logging
from rollcall.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)


async def seed_admin(db: AsyncSession, email: str, password: str, full_name: str) -> User:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    user = result.scalar_one_or_none()
    if not user:
        user = User(
            full_name=full_name,
            email=email,
            password_hash=hash_password(password),
            role=Role.ADMIN.value,
        )
        db.add(user)
        logger.info("Created admin user %s", email)
    else:
        user.role = Role.ADMIN.value
        user.password_hash = hash_password(password)
        user.full_name = full_name
        logger.info("Updated existing user %s to admin", email)
    await db.commit()
    return user


async def main() -> None:
    configure_logging(settings.log_level)
    if not settings.admin_email or not settings.admin_password:
        raise SystemExit("ADMIN_EMAIL and ADMIN_PASSWORD must be set")
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db, settings.admin_email, settings.admin_password, settings.admin_name)
        except Exception:
            await db.rollback()
            logger.exception("Admin seed failed")
            raise


if __name__ == "__main__":
    asyncio.run(main())
