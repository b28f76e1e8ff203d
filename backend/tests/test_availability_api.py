def register_user(client, name, email, role, password="password123"):
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "role": role, "password": password, "confirm_password": password},
    )
    assert response.status_code == 201
    return response.json()


def login_user(client, email, password="password123"):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["access_token"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def _create(client, token, path, payload):
    response = client.post(path, json=payload, headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()


def _seed_department(client):
    register_user(client, "Head Of Dept", "hod@example.com", "HOD")
    anita = register_user(client, "Anita Rao", "anita@example.com", "Faculty")
    vikram = register_user(client, "Vikram Shah", "vikram@example.com", "Faculty")
    register_user(client, "Student One", "student@example.com", "Student")
    hod_token = login_user(client, "hod@example.com")

    subject = _create(client, hod_token, "/api/subjects/", {"name": "Data Structures", "short_name": "ds"})
    a101 = _create(client, hod_token, "/api/rooms/", {"number": "A101"})
    a102 = _create(client, hod_token, "/api/rooms/", {"number": "A102"})
    lecture = _create(client, hod_token, "/api/slot-types/", {"name": "Lecture"})
    lunch = _create(client, hod_token, "/api/slot-types/", {"name": "Break"})
    timetable = _create(client, hod_token, "/api/timetables/", {"name": "CSE Sem 3"})

    slots_path = f"/api/timetables/{timetable['id']}/slots"
    _create(
        client,
        hod_token,
        slots_path,
        {
            "day": "Monday",
            "start_time": "10:00",
            "end_time": "11:00",
            "slot_type_id": lecture["id"],
            "subject_id": subject["id"],
            "room_id": a102["id"],
            "faculty_id": vikram["id"],
        },
    )
    first = _create(
        client,
        hod_token,
        slots_path,
        {
            "day": "Monday",
            "start_time": "9:00",
            "end_time": "10:00",
            "slot_type_id": lecture["id"],
            "subject_id": subject["id"],
            "room_id": a101["id"],
            "faculty_id": anita["id"],
        },
    )
    assert first["start_time"] == "09:00"
    _create(
        client,
        hod_token,
        slots_path,
        {"day": "Monday", "start_time": "11:00", "end_time": "11:15", "slot_type_id": lunch["id"]},
    )
    return {"anita": anita, "vikram": vikram, "a101": a101, "a102": a102}


def test_availability_requires_a_session(client):
    for path in ("/api/availability/faculty", "/api/availability/rooms"):
        response = client.get(path)
        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized"

    bad_token = client.get("/api/availability/faculty", headers=auth("not-a-token"))
    assert bad_token.status_code == 401


def test_faculty_availability_over_http(client):
    seeded = _seed_department(client)
    student_token = login_user(client, "student@example.com")

    response = client.get("/api/availability/faculty", headers=auth(student_token))
    assert response.status_code == 200
    data = response.json()

    # Students are not part of the faculty universe; HOD is.
    assert [item["name"] for item in data["facultyWise"]] == ["Anita Rao", "Head Of Dept", "Vikram Shah"]
    assert [(item["day"], item["startTime"]) for item in data["slotWise"]] == [
        ("Monday", "09:00"),
        ("Monday", "10:00"),
    ]

    anita = data["facultyWise"][0]
    assert anita["id"] == seeded["anita"]["id"]
    assert anita["availability"] == "Active"
    occupied = anita["occupiedSlots"][0]
    assert occupied["timetableName"] == "CSE Sem 3"
    assert occupied["subjectShortName"] == "DS"
    assert occupied["roomNumber"] == "A101"
    assert [slot["id"] for slot in anita["freeSlots"]] == ["free-Monday-10:00"]

    hod = data["facultyWise"][1]
    assert hod["occupiedSlots"] == []
    assert len(hod["freeSlots"]) == 2

    nine = data["slotWise"][0]
    assert [item["name"] for item in nine["busyFaculty"]] == ["Anita Rao"]
    assert [item["name"] for item in nine["freeFaculty"]] == ["Head Of Dept", "Vikram Shah"]


def test_room_availability_over_http(client):
    _seed_department(client)
    faculty_token = login_user(client, "anita@example.com")

    response = client.get("/api/availability/rooms", headers=auth(faculty_token))
    assert response.status_code == 200
    data = response.json()

    assert [item["number"] for item in data["roomWise"]] == ["A101", "A102"]
    a101 = data["roomWise"][0]
    assert [(slot["day"], slot["startTime"]) for slot in a101["occupiedSlots"]] == [("Monday", "09:00")]
    assert [slot["startTime"] for slot in a101["freeSlots"]] == ["10:00"]

    ten = data["slotWise"][1]
    assert [item["number"] for item in ten["occupiedRooms"]] == ["A102"]
    assert [item["number"] for item in ten["freeRooms"]] == ["A101"]


def test_availability_with_no_timetables(client):
    register_user(client, "Anita Rao", "anita@example.com", "Faculty")
    token = login_user(client, "anita@example.com")

    faculty = client.get("/api/availability/faculty", headers=auth(token)).json()
    assert faculty["slotWise"] == []
    assert faculty["facultyWise"][0]["freeSlots"] == []

    rooms = client.get("/api/availability/rooms", headers=auth(token)).json()
    assert rooms == {"roomWise": [], "slotWise": []}
