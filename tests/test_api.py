def course(client, course_id):
    resp = client.get("/api/courses/%d" % course_id)
    assert resp.status_code == 200
    return resp.json()


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["database"] == "connected"
    assert "timestamp" in body


def test_list_courses_has_available_seats(client):
    resp = client.get("/api/courses")
    assert resp.status_code == 200
    courses = resp.json()
    assert len(courses) == 6
    cs101 = courses[0]
    assert cs101["code"] == "CS101"
    assert cs101["capacity"] == 30
    assert cs101["enrolled"] == 0
    assert cs101["availableSeats"] == 30


def test_unknown_course_is_404(client):
    resp = client.get("/api/courses/999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Course not found"}


def test_register_conflict_drop_flow(client, student):
    resp = client.post("/api/register", json=student)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Successfully registered for the course"
    reg = body["registration"]
    assert reg["studentId"] == "S1"
    assert reg["courseCode"] == "CS101"
    assert reg["status"] == "active"
    assert course(client, 1)["enrolled"] == 1

    again = client.post("/api/register", json=student)
    assert again.status_code == 400
    assert again.json() == {"error": "Already registered for this course"}
    assert course(client, 1)["enrolled"] == 1

    listed = client.get("/api/registrations/S1").json()
    assert [r["id"] for r in listed] == [reg["id"]]

    dropped = client.delete("/api/registrations/%d" % reg["id"])
    assert dropped.status_code == 200
    assert dropped.json()["message"] == "Registration cancelled successfully"
    assert dropped.json()["registration"]["status"] == "dropped"
    assert course(client, 1)["enrolled"] == 0
    assert client.get("/api/registrations/S1").json() == []
    assert len(client.get("/api/registrations/S1", params={"status": "dropped"}).json()) == 1


def test_register_missing_field_is_400(client, student):
    del student["email"]
    resp = client.post("/api/register", json=student)
    assert resp.status_code == 400
    assert resp.json() == {"error": "All fields are required"}


def test_register_bad_course_id_is_400(client, student):
    student["courseId"] = "abc"
    resp = client.post("/api/register", json=student)
    assert resp.status_code == 400
    assert "courseId" in resp.json()["error"]


def test_register_unknown_course_is_404(client, student):
    student["courseId"] = 999
    resp = client.post("/api/register", json=student)
    assert resp.status_code == 404


def test_register_full_course_is_400(client, student):
    capacity = course(client, 5)["capacity"]
    for i in range(capacity):
        resp = client.post("/api/register", json={
            "studentId": "F%d" % i, "studentName": "Filler %d" % i,
            "email": "f%d@example.com" % i, "courseId": 5,
        })
        assert resp.status_code == 201
    assert course(client, 5)["availableSeats"] == 0

    student["courseId"] = 5
    resp = client.post("/api/register", json=student)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Course is full"}
    assert course(client, 5)["enrolled"] == capacity


def test_admin_lists_active_registrations(client, student):
    client.post("/api/register", json=student)
    other = dict(student, studentId="S2", email="s2@example.com", courseId=2)
    second = client.post("/api/register", json=other).json()["registration"]

    listed = client.get("/api/registrations").json()
    assert [r["studentId"] for r in listed] == ["S2", "S1"]

    client.delete("/api/registrations/%d" % second["id"])
    assert [r["studentId"] for r in client.get("/api/registrations").json()] == ["S1"]


def test_drop_unknown_registration_is_404(client):
    resp = client.delete("/api/registrations/12345")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Registration not found"}


def test_unknown_status_filter_is_400(client):
    resp = client.get("/api/registrations", params={"status": "pending"})
    assert resp.status_code == 400


def test_storage_failure_is_500_and_keeps_count(client, student, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from sqlalchemy.orm import Session

    def broken_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))
    monkeypatch.setattr(Session, "commit", broken_commit)

    resp = client.post("/api/register", json=student)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to register for course"}
    assert course(client, 1)["enrolled"] == 0


def test_padded_student_id_lookup(client, student):
    student["studentId"] = " S1 "
    assert client.post("/api/register", json=student).status_code == 201
    listed = client.get("/api/registrations/%20S1%20").json()
    assert [r["studentId"] for r in listed] == ["S1"]


def test_course_id_zero_is_missing_field(client, student):
    student["courseId"] = 0
    resp = client.post("/api/register", json=student)
    assert resp.status_code == 400
    assert resp.json() == {"error": "All fields are required"}
