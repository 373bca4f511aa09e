import pytest
from httpx import AsyncClient

from rollcall.core.models import Enrollment, Subject


async def _mark(client, subject, user, day, *marks):
    response = await client.post(
        f"/api/v1/attendance/subjects/{subject.id}/sessions",
        json={
            "date": day,
            "records": [{"student_id": str(s.id), "status": status} for s, status in marks],
        },
        headers=user,
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_student_dashboard(
    client: AsyncClient, db_session, admin, teacher, student, enrolled, auth
) -> None:
    art = Subject(name="Art", teacher_id=teacher.id)
    db_session.add(art)
    await db_session.commit()
    db_session.add(Enrollment(student_id=student.id, subject_id=art.id))
    await db_session.commit()

    staff = auth(admin)
    await _mark(client, enrolled, staff, "2024-01-01", (student, "Present"))
    await _mark(client, enrolled, staff, "2024-01-02", (student, "Present"))
    await _mark(client, enrolled, staff, "2024-01-03", (student, "Present"))
    await _mark(client, enrolled, staff, "2024-01-04", (student, "Absent"))

    response = await client.get("/api/v1/dashboard/student", headers=auth(student))
    assert response.status_code == 200
    data = response.json()

    assert data["student"]["roll_number"] == "R002"
    # Subjects are ordered by name
    art_stats, math_stats = data["subjects"]
    assert art_stats["subject_name"] == "Art"
    assert art_stats["total_classes"] == 0
    assert art_stats["status_tier"] == "neutral"
    assert art_stats["advisory_message"] == "no attendance recorded yet"

    assert math_stats["total_classes"] == 4
    assert math_stats["attended_classes"] == 3
    assert math_stats["percentage"] == 75.0
    assert math_stats["status_tier"] == "ok"
    assert math_stats["advisory_message"] == "can skip 0 classes safely"

    assert data["global"] == {
        "total_subjects": 2,
        "total_classes_held": 4,
        "total_classes_attended": 3,
        "overall_percentage": 75.0,
    }

    trend = data["trend"]
    assert trend["labels"] == ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"]
    assert trend["datasets"][0]["values"] == [None, None, None, None]
    assert trend["datasets"][1]["values"] == [1, 1, 1, 0]


@pytest.mark.asyncio
async def test_student_dashboard_without_enrollments(client: AsyncClient, student, auth) -> None:
    response = await client.get("/api/v1/dashboard/student", headers=auth(student))
    assert response.status_code == 200
    data = response.json()
    assert data["subjects"] == []
    assert data["global"]["overall_percentage"] == 0
    assert data["trend"] == {"labels": [], "datasets": []}


@pytest.mark.asyncio
async def test_student_dashboard_requires_student(client: AsyncClient, teacher, auth) -> None:
    response = await client.get("/api/v1/dashboard/student", headers=auth(teacher))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_teacher_dashboard(client: AsyncClient, teacher, enrolled, auth) -> None:
    response = await client.get("/api/v1/dashboard/teacher", headers=auth(teacher))
    assert response.status_code == 200
    data = response.json()
    assert data["teacher"]["name"] == "Tara Teacher"
    assert data["subjects"] == [
        {"id": str(enrolled.id), "name": "Mathematics", "enrolled_students": 2}
    ]


@pytest.mark.asyncio
async def test_admin_dashboard(
    client: AsyncClient, admin, teacher, student, second_student, enrolled, auth
) -> None:
    staff = auth(teacher)
    await _mark(client, enrolled, staff, "2024-01-01", (student, "Present"), (second_student, "Absent"))
    await _mark(client, enrolled, staff, "2024-01-02", (student, "Present"), (second_student, "Present"))

    response = await client.get("/api/v1/dashboard/admin", headers=auth(admin))
    assert response.status_code == 200
    data = response.json()
    assert data["total_students"] == 2
    assert data["total_teachers"] == 1
    assert data["total_subjects"] == 1
    assert data["total_classes_held"] == 4
    assert data["average_attendance"] == 75.0
    assert data["daily_rates"] == [
        {"date": "2024-01-01", "percentage": 50.0},
        {"date": "2024-01-02", "percentage": 100.0},
    ]


@pytest.mark.asyncio
async def test_admin_dashboard_empty(client: AsyncClient, admin, auth) -> None:
    response = await client.get("/api/v1/dashboard/admin", headers=auth(admin))
    assert response.status_code == 200
    assert response.json()["average_attendance"] == 0
    assert response.json()["daily_rates"] == []
