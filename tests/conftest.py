import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import rollcall.core.models  # noqa: F401
from rollcall.auth.models import User
from rollcall.auth.security import create_access_token, hash_password
from rollcall.core.enums import Role
from rollcall.core.models import Enrollment, Subject
from rollcall.db.session import Base, get_db
from rollcall.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "secret123"


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test; overrides the FastAPI dependency."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def make_user(
    db: AsyncSession,
    role: Role,
    email: str,
    full_name: str,
    roll_number: str = None,
    year: int = None,
) -> User:
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role.value,
        roll_number=roll_number,
        year=year,
    )
    db.add(user)
    await db.commit()
    return user


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(subject={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
async def admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, Role.ADMIN, "admin@example.com", "Admin User")


@pytest.fixture()
async def teacher(db_session: AsyncSession) -> User:
    return await make_user(db_session, Role.TEACHER, "teacher@example.com", "Tara Teacher")


@pytest.fixture()
async def other_teacher(db_session: AsyncSession) -> User:
    return await make_user(db_session, Role.TEACHER, "other@example.com", "Omar Other")


@pytest.fixture()
async def student(db_session: AsyncSession) -> User:
    return await make_user(
        db_session, Role.STUDENT, "student@example.com", "Sam Student", roll_number="R002", year=2
    )


@pytest.fixture()
async def second_student(db_session: AsyncSession) -> User:
    return await make_user(
        db_session, Role.STUDENT, "alex@example.com", "Alex Able", roll_number="R001", year=2
    )


@pytest.fixture()
async def subject(db_session: AsyncSession, teacher: User) -> Subject:
    obj = Subject(name="Mathematics", teacher_id=teacher.id)
    db_session.add(obj)
    await db_session.commit()
    return obj


@pytest.fixture()
async def enrolled(
    db_session: AsyncSession, subject: Subject, student: User, second_student: User
) -> Subject:
    """The Mathematics subject with both students enrolled."""
    db_session.add_all([
        Enrollment(student_id=student.id, subject_id=subject.id),
        Enrollment(student_id=second_student.id, subject_id=subject.id),
    ])
    await db_session.commit()
    return subject


@pytest.fixture()
def auth():
    """Build bearer headers for a user: ``auth(teacher)``."""
    return auth_headers
