import pytest
from httpx import AsyncClient
from sqlalchemy import select

from rollcall.core.models import AttendanceRecord, Enrollment


@pytest.mark.asyncio
async def test_create_subject_with_teacher(client: AsyncClient, admin, teacher, auth) -> None:
    response = await client.post(
        "/api/v1/subjects",
        json={"name": "Physics", "teacher_id": str(teacher.id)},
        headers=auth(admin),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Physics"
    assert data["teacher_id"] == str(teacher.id)
    assert data["teacher_name"] == "Tara Teacher"


@pytest.mark.asyncio
async def test_create_subject_rejects_non_teacher(client: AsyncClient, admin, student, auth) -> None:
    response = await client.post(
        "/api/v1/subjects",
        json={"name": "Physics", "teacher_id": str(student.id)},
        headers=auth(admin),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid teacher"


@pytest.mark.asyncio
async def test_list_subjects_by_name(client: AsyncClient, admin, auth) -> None:
    for name in ("Zoology", "Algebra"):
        await client.post("/api/v1/subjects", json={"name": name}, headers=auth(admin))
    response = await client.get("/api/v1/subjects", headers=auth(admin))
    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Algebra", "Zoology"]
    assert response.json()[0]["teacher_name"] is None


@pytest.mark.asyncio
async def test_teacher_lists_own_subjects_with_counts(
    client: AsyncClient, teacher, other_teacher, enrolled, auth
) -> None:
    response = await client.get("/api/v1/subjects/mine", headers=auth(teacher))
    assert response.status_code == 200
    assert response.json() == [
        {"id": str(enrolled.id), "name": "Mathematics", "enrolled_students": 2}
    ]

    response = await client.get("/api/v1/subjects/mine", headers=auth(other_teacher))
    assert response.json() == []


@pytest.mark.asyncio
async def test_delete_subject_cascades(
    client: AsyncClient, db_session, admin, student, enrolled, auth
) -> None:
    await client.post(
        f"/api/v1/attendance/subjects/{enrolled.id}/sessions",
        json={"date": "2024-03-01", "records": [{"student_id": str(student.id), "status": "Absent"}]},
        headers=auth(admin),
    )
    response = await client.delete(f"/api/v1/subjects/{enrolled.id}", headers=auth(admin))
    assert response.status_code == 204

    enrollments = (await db_session.execute(
        select(Enrollment).where(Enrollment.subject_id == enrolled.id)
    )).scalars().all()
    records = (await db_session.execute(
        select(AttendanceRecord).where(AttendanceRecord.subject_id == enrolled.id)
    )).scalars().all()
    assert enrollments == []
    assert records == []


@pytest.mark.asyncio
async def test_delete_missing_subject(client: AsyncClient, admin, auth) -> None:
    response = await client.delete(
        "/api/v1/subjects/00000000-0000-0000-0000-000000000000", headers=auth(admin)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_enroll_student(client: AsyncClient, admin, student, subject, auth) -> None:
    payload = {"student_id": str(student.id), "subject_id": str(subject.id)}
    response = await client.post("/api/v1/enrollments", json=payload, headers=auth(admin))
    assert response.status_code == 201
    data = response.json()
    assert data["student_name"] == "Sam Student"
    assert data["roll_number"] == "R002"
    assert data["subject_name"] == "Mathematics"

    response = await client.post("/api/v1/enrollments", json=payload, headers=auth(admin))
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_enroll_unknown_student_or_subject(
    client: AsyncClient, admin, teacher, subject, student, auth
) -> None:
    response = await client.post(
        "/api/v1/enrollments",
        json={"student_id": str(teacher.id), "subject_id": str(subject.id)},
        headers=auth(admin),
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/v1/enrollments",
        json={"student_id": str(student.id), "subject_id": str(teacher.id)},
        headers=auth(admin),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_and_delete_enrollments(client: AsyncClient, admin, enrolled, auth) -> None:
    response = await client.get("/api/v1/enrollments", headers=auth(admin))
    assert response.status_code == 200
    items = response.json()
    assert len(items) == 2
    assert {i["subject_name"] for i in items} == {"Mathematics"}

    response = await client.delete(f"/api/v1/enrollments/{items[0]['id']}", headers=auth(admin))
    assert response.status_code == 204
    response = await client.get("/api/v1/enrollments", headers=auth(admin))
    assert len(response.json()) == 1

    response = await client.delete(f"/api/v1/enrollments/{items[0]['id']}", headers=auth(admin))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_enrollments_are_admin_only(client: AsyncClient, teacher, auth) -> None:
    response = await client.get("/api/v1/enrollments", headers=auth(teacher))
    assert response.status_code == 403
