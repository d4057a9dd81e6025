import logging

import pytest
from fastapi.testclient import TestClient

from app.models.user import Gender, UserRole

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def people(make_user):
    make_user("staff1", role=UserRole.STAFF, firstname="Alan", lastname="Turing")
    make_user("s1", department="Computing", level="200", gender=Gender.FEMALE)
    make_user("s2", department="Physics", level="300", gender=Gender.MALE)


@pytest.fixture
def staff(auth_headers):
    return auth_headers("staff1", "staff")


@pytest.fixture
def student(auth_headers):
    return auth_headers("s1", "student")


def create_unit(client, headers, code="CS101", name="Programming", staff_id="staff1"):
    return client.post(
        "/api/units",
        json={"unitCode": code, "unitName": name, "staffId": staff_id},
        headers=headers,
    )


def enroll(client, headers, student_id="s1", unit_code="CS101", session="2025-2026"):
    return client.post(
        "/api/enrollments",
        json={"studentId": student_id, "unitCode": unit_code, "session": session},
        headers=headers,
    )


def test_routes_require_bearer_token(client: TestClient):
    response = client.get("/api/students")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Wrongly formatted header", "code": "UNAUTHORIZED"}


def test_non_bearer_scheme_is_unauthorized(client: TestClient):
    response = client.get("/api/units", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401
    assert response.json()["message"] == "Wrongly formatted header"


def test_protected_routes_declare_bearer_security(client: TestClient):
    schema = client.get("/openapi.json").json()
    assert schema["components"]["securitySchemes"]["HTTPBearer"]["scheme"] == "bearer"
    assert schema["paths"]["/api/units"]["get"]["security"] == [{"HTTPBearer": []}]


def test_invalid_bearer_token_is_unauthorized(client: TestClient):
    response = client.get("/api/units", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["code"] == "MALFORMED_TOKEN"


def test_staff_routes_forbid_students(client: TestClient, people, student):
    response = create_unit(client, student)
    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden - Insufficient permissions"


def test_unit_lifecycle(client: TestClient, people, staff, student):
    created = create_unit(client, staff)
    assert created.status_code == 201
    unit = created.json()["data"]
    assert unit["unitCode"] == "CS101"
    assert unit["staff"]["userId"] == "staff1"

    duplicate = create_unit(client, staff, name="Other name")
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Unit code already exists"

    missing_staff = create_unit(client, staff, code="CS102", name="Data", staff_id="s1")
    assert missing_staff.status_code == 404
    assert missing_staff.json()["message"] == "Staff member not found"

    listing = client.get("/api/units", headers=student).json()
    assert listing["count"] == 1

    found = client.get("/api/units/search/CS101", headers=student)
    assert found.json()["data"]["unitName"] == "Programming"
    assert client.get("/api/units/search/NOPE", headers=student).status_code == 404

    filtered = client.get("/api/units/filter", params={"unitName": "Prog", "staffId": ""}, headers=student)
    assert filtered.json()["count"] == 1

    updated = client.put("/api/units/CS101", json={"newUnitName": "Intro to Programming"}, headers=staff)
    assert updated.status_code == 200
    assert updated.json()["data"]["unitName"] == "Intro to Programming"

    deleted = client.delete("/api/units/CS101", headers=staff)
    assert deleted.json() == {"success": True, "message": "Unit deleted successfully"}
    assert client.get("/api/units", headers=student).json()["count"] == 0


def test_audit_entries_name_the_actor(client: TestClient, people, staff, caplog):
    caplog.set_level(logging.INFO, logger="audit")
    create_unit(client, staff, code="CS301")

    record = next(r for r in caplog.records if r.name == "audit" and r.getMessage() == "CREATE_UNIT")
    assert record.audit["resource_id"] == "CS301"
    assert record.audit["actor_id"] == "staff1"
    assert record.audit["actor_role"] == "staff"
    assert record.audit["ip_address"] == "testclient"


def test_enrollment_lifecycle(client: TestClient, people, staff, student):
    create_unit(client, staff)

    created = enroll(client, staff)
    assert created.status_code == 201
    enrollment = created.json()["data"]
    assert enrollment["student"]["userId"] == "s1"
    assert enrollment["unit"]["unitCode"] == "CS101"

    duplicate = enroll(client, staff)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Student already enrolled for this session"

    assert enroll(client, staff, student_id="ghost").status_code == 404
    assert enroll(client, staff, unit_code="NOPE").status_code == 404

    enroll(client, staff, session="2026-2027")
    sessions = client.get("/api/enrollments/sessions/s1", headers=student).json()["data"]
    assert sessions == ["2025-2026", "2026-2027"]

    by_student = client.get("/api/enrollments/student/s1", headers=student).json()["data"]
    assert len(by_student) == 2
    by_unit = client.get("/api/enrollments/unit/CS101", headers=student).json()["data"]
    assert len(by_unit) == 2
    search = client.get("/api/enrollments/search/2026-", headers=student).json()["data"]
    assert len(search) == 1
    filtered = client.get("/api/enrollments/filter", params={"session": "undefined"}, headers=student).json()
    assert filtered["count"] == 2

    moved = client.put(f"/api/enrollments/{enrollment['id']}", json={"session": "2026-2027"}, headers=staff)
    assert moved.status_code == 409

    deleted = client.delete(f"/api/enrollments/{enrollment['id']}", headers=staff)
    assert deleted.status_code == 200
    assert client.delete(f"/api/enrollments/{enrollment['id']}", headers=staff).status_code == 404


def test_marks_create_then_merge(client: TestClient, people, staff, student):
    create_unit(client, staff)

    not_enrolled = client.post("/api/marks", json={"studentId": "s1", "unitCode": "CS101", "theory1": 10}, headers=staff)
    assert not_enrolled.status_code == 404
    assert not_enrolled.json()["message"] == "Student must enroll for the unit first"

    enroll(client, staff)
    created = client.post("/api/marks", json={"studentId": "s1", "unitCode": "CS101", "theory1": 10}, headers=staff)
    assert created.status_code == 201
    assert created.json()["message"] == "Marks registered successfully"

    merged = client.post("/api/marks", json={"studentId": "s1", "unitCode": "CS101", "prac1": 7}, headers=staff)
    assert merged.status_code == 200
    data = merged.json()["data"]
    assert (data["theory1"], data["prac1"], data["theory2"]) == (10, 7, None)

    by_student = client.get("/api/marks/s1", headers=student).json()["data"]
    assert len(by_student) == 1
    assert by_student[0]["unit"]["unitName"] == "Programming"
    by_unit = client.get("/api/marks/search/CS101", headers=student).json()["data"]
    assert by_unit[0]["student"]["userId"] == "s1"

    updated = client.put(f"/api/marks/{data['id']}", json={"theory2": 15}, headers=staff).json()["data"]
    assert (updated["theory1"], updated["theory2"]) == (10, 15)

    assert client.delete(f"/api/marks/{data['id']}", headers=staff).status_code == 200
    assert client.get("/api/marks", headers=student).json()["data"] == []


def test_marks_by_session(client: TestClient, people, staff, student):
    create_unit(client, staff)
    create_unit(client, staff, code="CS201", name="Algorithms")
    enroll(client, staff, session="S1")
    enroll(client, staff, unit_code="CS201", session="S2")
    for code in ("CS101", "CS201"):
        client.post("/api/marks", json={"studentId": "s1", "unitCode": code, "theory1": 50}, headers=staff)

    first = client.get("/api/marks/student/s1/session/S1", headers=student).json()["data"]
    assert [row["unitCode"] for row in first] == ["CS101"]
    empty = client.get("/api/marks/student/s1/session/S9", headers=student).json()["data"]
    assert empty == []


def test_student_listing_filters_and_edit(client: TestClient, people, staff, student, storage_root):
    listing = client.get("/api/students", headers=student).json()["data"]
    assert {row["userId"] for row in listing} == {"s1", "s2"}
    assert all("hashedPassword" not in row and "refreshToken" not in row for row in listing)

    filtered = client.get("/api/students/filter", params={"department": "Phys", "gender": ""}, headers=student).json()
    assert filtered["count"] == 1
    assert filtered["data"][0]["userId"] == "s2"

    bad_gender = client.get("/api/students/filter", params={"gender": "Other"}, headers=student)
    assert bad_gender.status_code == 400

    search = client.get("/api/students/search/s2@", headers=student).json()["data"]
    assert [row["userId"] for row in search] == ["s2"]

    assert client.get("/api/students/staff1", headers=student).status_code == 404

    edited = client.put(
        "/api/students/edit/s1",
        data={"firstname": "Augusta", "level": ""},
        files={"profilePic": ("new.webp", PNG_BYTES, "image/webp")},
        headers=staff,
    )
    assert edited.status_code == 200
    data = edited.json()["data"]
    assert data["firstname"] == "Augusta"
    assert data["level"] == "200"
    assert data["profilePic"].startswith("profilePic/")
    assert (storage_root / "public" / data["profilePic"]).exists()

    assert client.delete("/api/students/s2", headers=student).status_code == 403
    assert client.delete("/api/students/s2", headers=staff).status_code == 200
    assert client.get("/api/students/s2", headers=student).status_code == 404


def test_evidence_upload_and_grouping(client: TestClient, people, staff, student, storage_root):
    create_unit(client, staff)

    image = client.post(
        "/api/evidences",
        data={"unitCode": "CS101", "description": "lab"},
        files={"file": ("lab.png", PNG_BYTES, "image/png")},
        headers=student,
    )
    assert image.status_code == 201
    image_data = image.json()["data"]
    assert image_data["evidenceType"] == "image"
    assert image_data["studentId"] == "s1"
    assert image_data["originalName"] == "lab.png"
    assert (storage_root / "public" / image_data["filename"]).exists()

    video = client.post(
        "/api/evidences",
        data={"unitCode": "CS101"},
        files={"file": ("demo.mp4", b"\x00" * 128, "video/mp4")},
        headers=student,
    )
    assert video.status_code == 201

    rejected = client.post(
        "/api/evidences",
        data={"unitCode": "CS101"},
        files={"file": ("notes.pdf", b"%PDF", "application/pdf")},
        headers=student,
    )
    assert rejected.status_code == 415

    missing = client.post("/api/evidences", data={"unitCode": "CS101"}, headers=student)
    assert missing.status_code == 400
    assert missing.json()["code"] == "MISSING_FILE"

    staff_upload = client.post(
        "/api/evidences",
        data={"unitCode": "CS101"},
        files={"file": ("lab.png", PNG_BYTES, "image/png")},
        headers=staff,
    )
    assert staff_upload.status_code == 403

    groups = client.get("/api/evidences/student/s1", headers=staff).json()["data"]
    assert len(groups) == 1
    assert groups[0]["unitCode"] == "CS101"
    assert groups[0]["unitName"] == "Programming"
    assert len(groups[0]["images"]) == 1
    assert len(groups[0]["videos"]) == 1

    videos = client.get("/api/evidences/student/s1/unit/CS101/videos", headers=staff).json()["data"]
    assert [item["originalName"] for item in videos] == ["demo.mp4"]
    assert len(client.get("/api/evidences/unit/CS101", headers=staff).json()["data"]) == 2

    updated = client.put(
        f"/api/evidences/{image_data['id']}",
        data={"description": "revised"},
        headers=staff,
    )
    assert updated.json()["data"]["description"] == "revised"

    assert client.delete(f"/api/evidences/{image_data['id']}", headers=staff).status_code == 200
    assert len(client.get("/api/evidences", headers=staff).json()["data"]) == 1
