from datetime import date

import pytest


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


def headers_for(client, email):
    return {"Authorization": f"Bearer {login_user(client, email)}"}


MONDAY = "2026-10-19"


@pytest.fixture()
def campus(client):
    register_user(client, "Head Of Dept", "hod@example.com", "HOD")
    anita = register_user(client, "Anita Rao", "anita@example.com", "Faculty")
    vikram = register_user(client, "Vikram Shah", "vikram@example.com", "Faculty")
    register_user(client, "Student One", "student@example.com", "Student")
    hod = headers_for(client, "hod@example.com")

    def create(path, payload):
        response = client.post(path, json=payload, headers=hod)
        assert response.status_code == 201, response.text
        return response.json()

    subject = create("/api/subjects/", {"name": "Data Structures", "short_name": "DS"})
    room = create("/api/rooms/", {"number": "A101"})
    lecture = create("/api/slot-types/", {"name": "Lecture"})
    lab = create("/api/slot-types/", {"name": "Lab"})
    lunch = create("/api/slot-types/", {"name": "Break"})
    b1 = create("/api/batches/", {"name": "B1"})
    b2 = create("/api/batches/", {"name": "B2"})
    timetable = create("/api/timetables/", {"name": "CSE Sem 3"})
    group = create("/api/groups/", {"title": "CSE A", "description": "Section A", "default_role": "Viewer"})
    assert client.post(f"/api/timetables/{timetable['id']}/groups/{group['id']}", headers=hod).status_code == 201

    slots_path = f"/api/timetables/{timetable['id']}/slots"
    taught = {"subject_id": subject["id"], "room_id": room["id"]}
    slots = {
        "ds_lecture": create(
            slots_path,
            {"day": "Monday", "start_time": "09:00", "end_time": "10:00", "slot_type_id": lecture["id"],
             "faculty_id": anita["id"], **taught},
        ),
        "lunch": create(
            slots_path,
            {"day": "Monday", "start_time": "11:00", "end_time": "11:15", "slot_type_id": lunch["id"]},
        ),
        "lab_b1": create(
            slots_path,
            {"day": "Monday", "start_time": "10:00", "end_time": "11:00", "slot_type_id": lab["id"],
             "faculty_id": vikram["id"], "batch_id": b1["id"], **taught},
        ),
        "lab_b2": create(
            slots_path,
            {"day": "Tuesday", "start_time": "09:00", "end_time": "11:00", "slot_type_id": lab["id"],
             "faculty_id": vikram["id"], "batch_id": b2["id"], **taught},
        ),
    }

    users = {
        "anita": headers_for(client, "anita@example.com"),
        "vikram": headers_for(client, "vikram@example.com"),
        "student": headers_for(client, "student@example.com"),
    }
    for headers in users.values():
        assert client.post("/api/groups/join", json={"code": group["code"]}, headers=headers).status_code == 200

    return {"hod": hod, **users, "slots": slots, "lab": lab, "b1": b1, "b2": b2}


def _schedule_ids(client, headers):
    weekly = client.get("/api/schedule/", headers=headers).json()["weeklySchedule"]
    return {day: [slot["id"] for slot in slots] for day, slots in weekly.items() if slots}


def test_student_schedule_covers_group_timetables(client, campus):
    slots = campus["slots"]
    response = client.get("/api/schedule/", headers=campus["student"])
    assert response.status_code == 200
    data = response.json()

    assert data["userName"] == "Student One"
    assert data["userRole"] == "Student"
    assert set(data["weeklySchedule"]) == {
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
    }
    monday = data["weeklySchedule"]["Monday"]
    assert [slot["id"] for slot in monday] == [
        slots["ds_lecture"]["id"],
        slots["lab_b1"]["id"],
        slots["lunch"]["id"],
    ]
    assert [slot["isBreak"] for slot in monday] == [False, False, True]
    assert monday[0]["subjectShortName"] == "DS"
    assert monday[0]["facultyName"] == "Anita Rao"
    assert monday[1]["batchName"] == "B1"
    assert [slot["id"] for slot in data["weeklySchedule"]["Tuesday"]] == [slots["lab_b2"]["id"]]


def test_faculty_schedule_shows_only_own_slots(client, campus):
    slots = campus["slots"]
    assert _schedule_ids(client, campus["anita"]) == {"Monday": [slots["ds_lecture"]["id"]]}
    assert _schedule_ids(client, campus["vikram"]) == {
        "Monday": [slots["lab_b1"]["id"]],
        "Tuesday": [slots["lab_b2"]["id"]],
    }


def test_schedule_without_groups_is_empty(client):
    register_user(client, "Loner", "loner@example.com", "Student")
    data = client.get("/api/schedule/", headers=headers_for(client, "loner@example.com")).json()
    assert all(slots == [] for slots in data["weeklySchedule"].values())
    assert data["slotSummaries"] == {}


def test_student_preferences_filter_schedule(client, campus):
    slots = campus["slots"]
    student = campus["student"]

    prefs = client.get("/api/preferences/", headers=student).json()
    assert all(item["enabled"] for item in prefs["slot_types"])
    assert not any(item["selected"] for item in prefs["batches"])

    disabled = client.put(f"/api/preferences/slot-types/{campus['lab']['id']}", json={"enabled": False}, headers=student)
    assert disabled.status_code == 200
    lab_pref = next(item for item in disabled.json()["slot_types"] if item["name"] == "Lab")
    assert lab_pref["enabled"] is False
    assert _schedule_ids(client, student) == {"Monday": [slots["ds_lecture"]["id"], slots["lunch"]["id"]]}

    client.put(f"/api/preferences/slot-types/{campus['lab']['id']}", json={"enabled": True}, headers=student)
    selected = client.put("/api/preferences/batches", json={"batch_ids": [campus["b1"]["id"]]}, headers=student)
    assert selected.status_code == 200
    assert [item["name"] for item in selected.json()["batches"] if item["selected"]] == ["B1"]

    # Slots without a batch stay visible whatever the selection.
    assert _schedule_ids(client, student) == {
        "Monday": [slots["ds_lecture"]["id"], slots["lab_b1"]["id"], slots["lunch"]["id"]],
    }

    client.put("/api/preferences/batches", json={"batch_ids": []}, headers=student)
    assert slots["lab_b2"]["id"] in _schedule_ids(client, student)["Tuesday"]

    unknown_batch = client.put("/api/preferences/batches", json={"batch_ids": ["missing"]}, headers=student)
    assert unknown_batch.status_code == 400
    assert unknown_batch.json() == {"message": "Unknown batch ids", "details": {"batch_ids": ["missing"]}}
    unknown_type = client.put("/api/preferences/slot-types/missing", json={"enabled": False}, headers=student)
    assert unknown_type.status_code == 404
    assert unknown_type.json()["details"]["resource_type"] == "Slot type"


def test_faculty_preferences_do_not_filter_their_schedule(client, campus):
    anita = campus["anita"]
    lecture_id = next(
        item["id"] for item in client.get("/api/slot-types/", headers=anita).json() if item["name"] == "Lecture"
    )
    client.put(f"/api/preferences/slot-types/{lecture_id}", json={"enabled": False}, headers=anita)
    assert _schedule_ids(client, anita) == {"Monday": [campus["slots"]["ds_lecture"]["id"]]}


def test_lecture_summary_upsert_and_permissions(client, campus):
    slots = campus["slots"]
    lecture_id = slots["ds_lecture"]["id"]
    path = f"/api/lecture-summaries/{lecture_id}/{MONDAY}"

    assert client.put(path, json={"content": "Trees"}, headers=campus["student"]).status_code == 403
    assert client.put(path, json={"content": "Trees"}, headers=campus["vikram"]).status_code == 403
    assert client.put(path, json={"content": "   "}, headers=campus["anita"]).status_code == 422
    assert (
        client.put(f"/api/lecture-summaries/missing/{MONDAY}", json={"content": "x"}, headers=campus["anita"])
        .status_code
        == 404
    )

    created = client.put(path, json={"content": "Covered AVL trees", "notes": "Quiz next week"}, headers=campus["anita"])
    assert created.status_code == 200
    summary = created.json()
    assert summary["createdByName"] == "Anita Rao"
    assert summary["slot"]["subjectName"] == "Data Structures"
    assert summary["slot"]["startTime"] == "09:00"

    updated = client.put(path, json={"content": "Covered AVL rotations"}, headers=campus["anita"])
    assert updated.json()["id"] == summary["id"]
    assert updated.json()["content"] == "Covered AVL rotations"
    assert updated.json()["notes"] is None

    detail = client.get(path, headers=campus["student"])
    assert detail.status_code == 200
    assert detail.json()["content"] == "Covered AVL rotations"
    assert client.get(f"/api/lecture-summaries/{lecture_id}/2026-10-26", headers=campus["student"]).status_code == 404

    assert client.delete(f"/api/lecture-summaries/{summary['id']}", headers=campus["vikram"]).status_code == 403
    assert client.delete(f"/api/lecture-summaries/{summary['id']}", headers=campus["anita"]).status_code == 200
    assert client.delete(f"/api/lecture-summaries/{summary['id']}", headers=campus["anita"]).status_code == 404


def test_day_summaries_list(client, campus):
    slots = campus["slots"]
    client.put(
        f"/api/lecture-summaries/{slots['ds_lecture']['id']}/{MONDAY}",
        json={"content": "Covered AVL trees"},
        headers=campus["anita"],
    )

    student_view = client.get(f"/api/lecture-summaries/?date={MONDAY}", headers=campus["student"])
    assert student_view.status_code == 200
    data = student_view.json()
    assert data["day"] == "Monday"
    assert data["userRole"] == "Student"
    assert data["canEdit"] is False
    assert [slot["id"] for slot in data["slots"]] == [
        slots["ds_lecture"]["id"],
        slots["lab_b1"]["id"],
        slots["lunch"]["id"],
    ]
    assert data["slots"][0]["summary"]["content"] == "Covered AVL trees"
    assert data["slots"][1]["summary"] is None

    faculty_view = client.get(f"/api/lecture-summaries/?date={MONDAY}", headers=campus["anita"]).json()
    assert faculty_view["canEdit"] is True
    assert [slot["id"] for slot in faculty_view["slots"]] == [slots["ds_lecture"]["id"]]

    tuesday = client.get("/api/lecture-summaries/?date=2026-10-20", headers=campus["student"]).json()
    assert [slot["id"] for slot in tuesday["slots"]] == [slots["lab_b2"]["id"]]

    assert client.get("/api/lecture-summaries/?date=19-10-2026", headers=campus["student"]).status_code == 422


def test_schedule_marks_slots_with_recent_summaries(client, campus):
    lecture_id = campus["slots"]["ds_lecture"]["id"]
    today = date.today().isoformat()
    client.put(f"/api/lecture-summaries/{lecture_id}/{today}", json={"content": "Intro"}, headers=campus["anita"])
    client.put(f"/api/lecture-summaries/{lecture_id}/2001-01-01", json={"content": "Old"}, headers=campus["anita"])

    summaries = client.get("/api/schedule/", headers=campus["student"]).json()["slotSummaries"]
    assert summaries == {lecture_id: [today]}


def test_deleting_slot_removes_its_summaries(client, campus):
    lecture_id = campus["slots"]["ds_lecture"]["id"]
    summary = client.put(
        f"/api/lecture-summaries/{lecture_id}/{MONDAY}", json={"content": "Intro"}, headers=campus["anita"]
    ).json()

    assert client.delete(f"/api/timetables/slots/{lecture_id}", headers=campus["hod"]).status_code == 200
    assert client.delete(f"/api/lecture-summaries/{summary['id']}", headers=campus["anita"]).status_code == 404
