from uuid import uuid4

import pytest

from classroom_app.core.dependencies import CallerContext, Role

from conftest import as_teacher, headers_for, principal_of


@pytest.fixture
async def school_setup(seed):
    school = await seed.school()
    math = await seed.subject(school, "Math")
    science = await seed.subject(school, "Science")
    return school, math, science


async def _create_classroom(client, caller, name, subjects):
    return await client.post(
        "/api/v1/classrooms",
        json={"name": name, "subjects": [str(s.id) for s in subjects]},
        headers=headers_for(caller),
    )


async def test_health(client):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Process-Time" in response.headers


async def test_database_health(client):
    response = await client.get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json()["database"] == "reachable"


async def test_create_classroom_returns_camel_case_envelope(client, school_setup):
    school, math, science = school_setup

    response = await _create_classroom(client, principal_of(school), "Grade 5A", [math, science])

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Classroom created successfully"
    assert body["showMessage"] is True
    assert body["classroom"]["name"] == "Grade 5A"
    assert body["classroom"]["school"] == str(school.id)
    assert body["classroom"]["mentorId"] is None

    days = await client.get(
        f"/api/v1/classrooms/{body['classroom']['id']}/days", headers=headers_for(principal_of(school))
    )
    assert [d["day"] for d in days.json()["days"]][:2] == ["Monday", "Tuesday"]


async def test_duplicate_classroom_is_409(client, school_setup):
    school, math, _ = school_setup
    caller = principal_of(school)
    await _create_classroom(client, caller, "Grade 5A", [math])

    response = await _create_classroom(client, caller, "Grade 5A", [math])

    assert response.status_code == 409
    assert response.json() == {"message": "Classroom with this name already exist"}


async def test_teacher_cannot_create_classroom(client, seed, school_setup):
    school, math, _ = school_setup
    teacher = await seed.teacher(school, "Asha Rao", math)

    response = await _create_classroom(client, as_teacher(teacher), "Grade 5A", [math])

    assert response.status_code == 403
    assert response.json()["message"] == "You are not allowed to perform this action"


async def test_invalid_body_is_400(client, school_setup):
    school, _, _ = school_setup

    response = await client.post(
        "/api/v1/classrooms", json={"name": "Grade 5A", "subjects": []}, headers=headers_for(principal_of(school))
    )

    assert response.status_code == 400
    assert "subjects" in response.json()["message"]


async def test_missing_caller_headers_is_400(client):
    response = await client.get("/api/v1/subjects")

    assert response.status_code == 400


async def test_malformed_id_is_400_and_unknown_id_is_404(client, school_setup):
    school, _, _ = school_setup
    headers = headers_for(principal_of(school))

    malformed = await client.delete("/api/v1/classrooms/not-a-uuid", headers=headers)
    unknown = await client.delete(f"/api/v1/classrooms/{uuid4()}", headers=headers)

    assert malformed.status_code == 400
    assert unknown.status_code == 404
    assert unknown.json() == {"message": "Classroom not found"}


async def test_set_day_periods_accepts_any_day_case(client, seed, school_setup):
    school, math, _ = school_setup
    caller = principal_of(school)
    headers = headers_for(caller)
    teacher = await seed.teacher(school, "Asha Rao", math)
    room_id = (await _create_classroom(client, caller, "Grade 5A", [math])).json()["classroom"]["id"]
    payload = {"periods": [
        {"subject": str(math.id), "teacher": str(teacher.id), "startTime": "09:00", "endTime": "09:45"},
    ]}

    updated = await client.put(f"/api/v1/classrooms/{room_id}/days/monday", json=payload, headers=headers)
    unknown = await client.put(f"/api/v1/classrooms/{room_id}/days/funday", json=payload, headers=headers)

    assert updated.status_code == 200
    assert updated.json()["timetable"]["day"] == "Monday"
    assert updated.json()["timetable"]["periods"][0]["startTime"] == "09:00"
    assert unknown.status_code == 400
    assert unknown.json() == {"message": "Invalid day: funday"}


async def test_assign_and_kick_students_flow(client, seed, school_setup):
    school, math, _ = school_setup
    caller = principal_of(school)
    headers = headers_for(caller)
    s1 = await seed.student(school, "Aarav", "1")
    s2 = await seed.student(school, "Bela", "2")
    room_id = (await _create_classroom(client, caller, "Grade 5A", [math])).json()["classroom"]["id"]

    assigned = await client.post(
        "/api/v1/classrooms/assign/students",
        json={"studentsIds": [str(s1.id), str(s2.id)], "classroomId": room_id},
        headers=headers,
    )
    assert assigned.status_code == 200
    assert assigned.json()["newlyAssignedStudents"] == [str(s1.id), str(s2.id)]

    kicked = await client.put(
        "/api/v1/students/kick", json={"studentId": str(s1.id), "classroomId": room_id}, headers=headers
    )
    assert kicked.status_code == 200

    members = await client.get(f"/api/v1/students/classroom/{room_id}", headers=headers)
    assert [s["name"] for s in members.json()["students"]] == ["Bela"]
    assert members.json()["totalStudents"] == 1


async def test_list_teachers_query_parameters(client, seed, school_setup):
    school, math, science = school_setup
    await seed.teacher(school, "Asha Rao", math)
    await seed.teacher(school, "Ravi Iyer", science)

    response = await client.get(
        "/api/v1/teachers",
        params={"sortField": "name", "sortDir": "asc", "pageSize": "all", "subjectId": str(science.id)},
        headers=headers_for(principal_of(school)),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["totalTeachers"] == 1
    assert body["teachers"][0]["name"] == "Ravi Iyer"
    assert body["teachers"][0]["subject"]["name"] == "Science"


async def test_page_size_over_limit_is_400(client, school_setup):
    school, _, _ = school_setup

    response = await client.get(
        "/api/v1/students", params={"pageSize": 1000}, headers=headers_for(principal_of(school))
    )

    assert response.status_code == 400


async def test_create_teacher_and_bulk_abort(client, school_setup):
    school, math, _ = school_setup
    headers = headers_for(principal_of(school))

    created = await client.post(
        "/api/v1/teachers",
        json={"name": "Asha Rao", "email": "asha@school.org", "subject": str(math.id)},
        headers=headers,
    )
    assert created.status_code == 201
    assert created.json()["teacher"]["email"] == "asha@school.org"

    bulk = await client.post(
        "/api/v1/teachers/bulk",
        json={"teachers": [
            {"name": "Ravi Iyer", "email": "ravi@school.org", "subject": "Math"},
            {"name": "Meera Das", "email": "meera@school.org", "subject": "Astrology"},
        ]},
        headers=headers,
    )
    assert bulk.status_code == 400
    assert bulk.json()["message"].startswith("Error creating Meera Das")

    listed = await client.get("/api/v1/teachers", headers=headers)
    assert listed.json()["totalTeachers"] == 1


async def test_teacher_takes_attendance_and_reads_percentages(client, seed, school_setup):
    school, math, _ = school_setup
    principal = principal_of(school)
    teacher = await seed.teacher(school, "Asha Rao", math)
    student = await seed.student(school, "Aarav", "1")
    room_id = (await _create_classroom(client, principal, "Grade 5A", [math])).json()["classroom"]["id"]
    await client.post(
        "/api/v1/classrooms/assign/students",
        json={"studentsIds": [str(student.id)], "classroomId": room_id},
        headers=headers_for(principal),
    )

    taken = await client.post(
        "/api/v1/attendance",
        json={
            "classroom": room_id,
            "subject": str(math.id),
            "date": "2026-10-12",
            "students": [{"student": str(student.id), "status": "present"}],
        },
        headers=headers_for(as_teacher(teacher)),
    )
    assert taken.status_code == 201
    assert taken.json()["presentCount"] == 1

    report = await client.get(f"/api/v1/teachers/me/attendance/{room_id}", headers=headers_for(as_teacher(teacher)))
    assert report.status_code == 200
    body = report.json()
    assert body["totalClasses"] == 1
    assert body["attendanceData"][0]["percentage"] == "100.00"

    schedule = await client.get("/api/v1/teachers/me/schedule", headers=headers_for(as_teacher(teacher)))
    assert schedule.status_code == 200
    assert schedule.json() == {"timetable": {}}


async def test_student_role_cannot_take_attendance(client, school_setup):
    school, math, _ = school_setup
    student_caller = CallerContext(school_id=school.id, profile_id=uuid4(), role=Role.STUDENT)

    response = await client.post(
        "/api/v1/attendance",
        json={"classroom": str(uuid4()), "subject": str(math.id), "date": "2026-10-12",
              "students": [{"student": str(uuid4()), "status": "present"}]},
        headers=headers_for(student_caller),
    )

    assert response.status_code == 403
