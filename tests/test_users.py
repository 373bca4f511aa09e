import pytest
from httpx import AsyncClient
from sqlalchemy import select

from rollcall.core.models import AttendanceRecord, Enrollment, LeaveRequest, Subject, User


@pytest.mark.asyncio
async def test_create_and_list_teachers(client: AsyncClient, admin, auth) -> None:
    for name, email in [("Zed Zane", "zed@example.com"), ("Ann Ames", "ann@example.com")]:
        response = await client.post(
            "/api/v1/teachers",
            json={"name": name, "email": email, "password": "secret123"},
            headers=auth(admin),
        )
        assert response.status_code == 201
        assert response.json()["email"] == email

    response = await client.get("/api/v1/teachers", headers=auth(admin))
    assert response.status_code == 200
    assert [t["name"] for t in response.json()] == ["Ann Ames", "Zed Zane"]


@pytest.mark.asyncio
async def test_create_teacher_duplicate_email(client: AsyncClient, admin, teacher, auth) -> None:
    response = await client.post(
        "/api/v1/teachers",
        json={"name": "Copy", "email": "TEACHER@example.com", "password": "secret123"},
        headers=auth(admin),
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_teacher_short_password(client: AsyncClient, admin, auth) -> None:
    response = await client.post(
        "/api/v1/teachers",
        json={"name": "Short", "email": "short@example.com", "password": "123"},
        headers=auth(admin),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_and_list_students(client: AsyncClient, admin, auth) -> None:
    for roll, email in [("R010", "b@example.com"), ("R003", "a@example.com")]:
        response = await client.post(
            "/api/v1/students",
            json={
                "name": f"Student {roll}",
                "email": email,
                "roll_number": roll,
                "year": 1,
                "password": "secret123",
            },
            headers=auth(admin),
        )
        assert response.status_code == 201
        assert response.json()["roll_number"] == roll

    response = await client.get("/api/v1/students", headers=auth(admin))
    assert [s["roll_number"] for s in response.json()] == ["R003", "R010"]


@pytest.mark.asyncio
async def test_users_endpoints_are_admin_only(client: AsyncClient, teacher, auth) -> None:
    response = await client.post(
        "/api/v1/students",
        json={
            "name": "Nope",
            "email": "nope@example.com",
            "roll_number": "R999",
            "year": 1,
            "password": "secret123",
        },
        headers=auth(teacher),
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_delete_student_removes_related_rows(
    client: AsyncClient, db_session, admin, student, enrolled, auth
) -> None:
    response = await client.post(
        f"/api/v1/attendance/subjects/{enrolled.id}/sessions",
        json={"date": "2024-01-10", "records": [{"student_id": str(student.id), "status": "Present"}]},
        headers=auth(admin),
    )
    assert response.status_code == 201
    response = await client.post(
        "/api/v1/leaves",
        json={"start_date": "2024-02-01", "end_date": "2024-02-02", "reason": "Sick"},
        headers=auth(student),
    )
    assert response.status_code == 201

    response = await client.delete(f"/api/v1/students/{student.id}", headers=auth(admin))
    assert response.status_code == 204

    for model in (Enrollment, AttendanceRecord, LeaveRequest):
        rows = (await db_session.execute(
            select(model).where(model.student_id == student.id)
        )).scalars().all()
        assert rows == []
    assert await db_session.get(User, student.id) is None


@pytest.mark.asyncio
async def test_delete_teacher_unassigns_subjects(
    client: AsyncClient, db_session, admin, teacher, subject, auth
) -> None:
    response = await client.delete(f"/api/v1/teachers/{teacher.id}", headers=auth(admin))
    assert response.status_code == 204

    result = await db_session.execute(
        select(Subject.teacher_id).where(Subject.id == subject.id)
    )
    assert result.scalar_one() is None


@pytest.mark.asyncio
async def test_delete_with_wrong_role_is_not_found(client: AsyncClient, admin, student, auth) -> None:
    response = await client.delete(f"/api/v1/teachers/{student.id}", headers=auth(admin))
    assert response.status_code == 404
    assert response.json()["detail"] == "Teacher not found"
