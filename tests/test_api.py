from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from schoolhub.api.deps import get_store
from schoolhub.main import app
from schoolhub.models.staff import Role, StaffAccount
from schoolhub.security import get_password_hash
from tests.conftest import student_payload


@pytest.fixture
def client(store):
    for username, role in (("admin", Role.ADMIN), ("teacher", Role.TEACHER)):
        account = StaffAccount(
            id=f"staff-{username}", username=username, password_hash=get_password_hash("pw"), role=role
        )
        store.staff[account.id] = account
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def login(client, username):
    resp = client.post("/api/auth/login", json={"username": username, "password": "pw"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def enroll(client, n, **extra):
    resp = client.post("/api/students/enroll", json=student_payload(n, **extra))
    assert resp.status_code == 201
    return resp.json()["student"]


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_requires_token(client):
    resp = client.get("/api/dashboard/")

    assert resp.status_code == 401


def test_bad_staff_login(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})

    assert resp.status_code == 401
    assert resp.json()["kind"] == "auth_error"


def test_enrollment_approval_and_student_bootstrap(client):
    admin = login(client, "admin")
    teacher = login(client, "teacher")
    student = enroll(client, 1)
    assert student["status"] == "pending"
    assert "password_hash" not in student

    assert client.get("/api/students/", headers=teacher).json() == []
    assert client.post(
        "/api/auth/student-login", json={"roll_number": "R001", "password": "R001"}
    ).status_code == 401

    assert client.put(f"/api/students/{student['id']}/approve", headers=teacher).status_code == 403
    resp = client.put(f"/api/students/{student['id']}/approve", headers=admin)
    assert resp.status_code == 200
    assert resp.json()["student"]["status"] == "approved"

    resp = client.post("/api/auth/student-login", json={"roll_number": "R001", "password": "R001"})
    assert resp.status_code == 200
    assert resp.json()["needs_setup"] is True
    assert "access_token" not in resp.json()

    resp = client.post(
        "/api/auth/student/setup-password",
        json={"roll_number": "R001", "temporary_password": "R001", "new_password": "fresh"},
    )
    assert resp.status_code == 200

    resp = client.post("/api/auth/student-login", json={"roll_number": "R001", "password": "fresh"})
    assert resp.status_code == 200
    me = {"Authorization": f"Bearer {resp.json()['access_token']}"}
    assert client.get("/api/auth/me", headers=me).json()["roll_number"] == "R001"
    assert client.get(f"/api/reports/student/{student['id']}", headers=me).status_code == 200


def test_student_cannot_read_other_report_or_staff_routes(client, store):
    admin = login(client, "admin")
    a = enroll(client, 1)
    b = enroll(client, 2)
    client.post("/api/students/bulk-approve", json={"student_ids": [a["id"], b["id"]]}, headers=admin)
    client.put(f"/api/students/{a['id']}/set-password", json={"password": "pw"}, headers=admin)
    token = client.post("/api/auth/student-login", json={"roll_number": "R001", "password": "pw"}).json()
    me = {"Authorization": f"Bearer {token['access_token']}"}

    resp = client.get(f"/api/reports/student/{b['id']}", headers=me)
    assert resp.status_code == 403
    assert resp.json()["kind"] == "forbidden"
    assert client.post("/api/marks/", json={}, headers=me).status_code in (403, 422)
    assert client.get("/api/reports/attendance", headers=me).status_code == 403


def test_duplicate_enrollment_is_400(client):
    enroll(client, 1)

    resp = client.post("/api/students/enroll", json={**student_payload(2), "roll_number": "R001"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Roll Number already exists"


def test_not_found_is_404(client):
    admin = login(client, "admin")

    resp = client.put("/api/students/missing/approve", headers=admin)

    assert resp.status_code == 404
    assert resp.json()["kind"] == "not_found"


def test_bulk_approve_reports_modified_count(client):
    admin = login(client, "admin")
    a = enroll(client, 1)

    resp = client.post("/api/students/bulk-approve", json={"student_ids": [a["id"], "ghost"]}, headers=admin)

    assert resp.json() == {"modified_count": 1, "skipped": ["ghost"]}
    assert client.post("/api/students/bulk-reject", json={"student_ids": []}, headers=admin).status_code == 400


def test_attendance_and_marks_flow(client):
    admin = login(client, "admin")
    teacher = login(client, "teacher")
    s = enroll(client, 1)
    client.put(f"/api/students/{s['id']}/approve", headers=admin)
    today = date.today().isoformat()

    resp = client.post(
        "/api/attendance/", json={"student_id": s["id"], "date": today, "status": "present"}, headers=teacher
    )
    assert resp.status_code == 200
    resp = client.post(
        "/api/attendance/bulk",
        json={"date": today, "attendances": [{"student_id": s["id"], "status": "absent"}]},
        headers=teacher,
    )
    assert resp.json() == {"saved": 1, "failed": []}
    rows = client.get(f"/api/attendance/date/{today}", headers=teacher).json()
    assert [(r["status"], r["student"]["roll_number"]) for r in rows] == [("absent", "R001")]

    bad = {"student_id": s["id"], "exam_type": "Final", "subject": "Maths", "score": 101}
    assert client.post("/api/marks/", json=bad, headers=teacher).status_code == 400
    ok = {**bad, "score": 88}
    assert client.post("/api/marks/", json=ok, headers=teacher).status_code == 201

    ranked = client.get("/api/marks/rank/Final", headers=teacher).json()
    assert [(r["average"], r["grade"]) for r in ranked] == [(88, "A")]
    assert len(client.get("/api/marks/student/all", headers=teacher).json()) == 1

    dash = client.get("/api/dashboard/", headers=admin).json()
    assert dash["total_students"] == 1
    assert (dash["present_today"], dash["total_today"]) == (0, 1)
    assert dash["pass_percentage"] == 100


def test_admin_student_management(client):
    admin = login(client, "admin")
    teacher = login(client, "teacher")

    resp = client.post("/api/students/", json=student_payload(1), headers=admin)
    assert resp.status_code == 201
    sid = resp.json()["id"]
    assert client.post("/api/students/", json=student_payload(2), headers=teacher).status_code == 403

    resp = client.put(f"/api/students/{sid}", json={"class_name": "12D"}, headers=admin)
    assert resp.json()["class_name"] == "12D"
    assert client.get("/api/students/pending", headers=admin).json()[0]["id"] == sid
    assert client.get("/api/students/pending", headers=teacher).status_code == 403
    assert client.get("/api/students/stats/overview", headers=admin).json()["pending"] == 1

    assert client.delete(f"/api/students/{sid}", headers=admin).status_code == 204
    assert client.get(f"/api/students/{sid}", headers=admin).status_code == 404


def test_monthly_report_rejects_out_of_range_year(client):
    teacher = login(client, "teacher")

    resp = client.get("/api/attendance/monthly/abc/1/0", headers=teacher)

    assert resp.status_code == 400
    assert resp.json()["kind"] == "validation_error"
