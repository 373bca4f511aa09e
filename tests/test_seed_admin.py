import pytest
from httpx import AsyncClient

from rollcall.auth.security import verify_password
from rollcall.db.seed_admin import seed_admin


@pytest.mark.asyncio
async def test_seed_creates_then_updates_admin(client: AsyncClient, db_session) -> None:
    user = await seed_admin(db_session, "boss@example.com", "first-pass", "Boss")
    assert user.role == "ADMIN"

    again = await seed_admin(db_session, "BOSS@example.com", "second-pass", "Big Boss")
    assert again.id == user.id
    assert again.full_name == "Big Boss"
    assert verify_password("second-pass", again.password_hash)

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "boss@example.com", "password": "second-pass", "portal": "ADMIN"},
    )
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "ADMIN"
