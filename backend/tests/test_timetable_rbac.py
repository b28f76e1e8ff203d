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


def _setup(client, default_role="Viewer"):
    register_user(client, "Head Of Dept", "hod@example.com", "HOD")
    register_user(client, "Anita Rao", "anita@example.com", "Faculty")
    register_user(client, "Student One", "student@example.com", "Student")
    register_user(client, "Outsider", "outsider@example.com", "Faculty")
    hod = headers_for(client, "hod@example.com")

    group = client.post(
        "/api/groups/",
        json={"title": "CSE A", "description": "Section A", "default_role": default_role},
        headers=hod,
    ).json()
    timetable = client.post(
        "/api/timetables/",
        json={"name": "  CSE Sem 3  ", "description": "   "},
        headers=hod,
    ).json()
    assert timetable["name"] == "CSE Sem 3"
    assert timetable["description"] is None

    assigned = client.post(f"/api/timetables/{timetable['id']}/groups/{group['id']}", headers=hod)
    assert assigned.status_code == 201

    anita = headers_for(client, "anita@example.com")
    student = headers_for(client, "student@example.com")
    for headers in (anita, student):
        joined = client.post("/api/groups/join", json={"code": group["code"].lower()}, headers=headers)
        assert joined.status_code == 200

    lecture = client.post("/api/slot-types/", json={"name": "Lecture"}, headers=hod).json()
    return {
        "hod": hod,
        "anita": anita,
        "student": student,
        "outsider": headers_for(client, "outsider@example.com"),
        "group": group,
        "timetable": timetable,
        "lecture": lecture,
    }


def _slot_payload(slot_type_id, **overrides):
    payload = {"day": "Tuesday", "start_time": "09:00", "end_time": "10:00", "slot_type_id": slot_type_id}
    payload.update(overrides)
    return payload


def test_timetable_visibility_follows_group_membership(client):
    ctx = _setup(client)
    timetable_id = ctx["timetable"]["id"]

    assert client.get("/api/timetables/", headers=ctx["outsider"]).json() == []
    assert client.get(f"/api/timetables/{timetable_id}", headers=ctx["outsider"]).status_code == 404

    student_list = client.get("/api/timetables/", headers=ctx["student"]).json()
    assert [item["id"] for item in student_list] == [timetable_id]
    assert student_list[0]["groups"][0]["group"]["title"] == "CSE A"
    assert student_list[0]["created_by"]["name"] == "Head Of Dept"

    assert client.get(f"/api/timetables/{timetable_id}", headers=ctx["student"]).status_code == 200
    assert len(client.get("/api/timetables/", headers=ctx["hod"]).json()) == 1
    assert client.get("/api/timetables/missing", headers=ctx["hod"]).status_code == 404


def test_viewers_cannot_edit_until_promoted(client):
    ctx = _setup(client)
    timetable_id = ctx["timetable"]["id"]
    slot = _slot_payload(ctx["lecture"]["id"])

    can_edit = client.get(f"/api/timetables/{timetable_id}/can-edit", headers=ctx["anita"])
    assert can_edit.json() == {"can_edit": False}
    assert client.post(f"/api/timetables/{timetable_id}/slots", json=slot, headers=ctx["anita"]).status_code == 403
    assert (
        client.put(f"/api/timetables/{timetable_id}", json={"name": "Renamed"}, headers=ctx["anita"]).status_code
        == 403
    )

    members = client.get(f"/api/groups/{ctx['group']['id']}/members", headers=ctx["hod"]).json()
    anita_membership = next(item for item in members if item["user"]["email"] == "anita@example.com")
    promoted = client.put(
        f"/api/groups/{ctx['group']['id']}/members/{anita_membership['id']}",
        json={"role": "Editor"},
        headers=ctx["hod"],
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "Editor"

    assert client.get(f"/api/timetables/{timetable_id}/can-edit", headers=ctx["anita"]).json()["can_edit"] is True
    created = client.post(f"/api/timetables/{timetable_id}/slots", json=slot, headers=ctx["anita"])
    assert created.status_code == 201
    renamed = client.put(
        f"/api/timetables/{timetable_id}",
        json={"name": "Renamed", "description": "Odd semester"},
        headers=ctx["anita"],
    )
    assert renamed.status_code == 200
    assert renamed.json()["description"] == "Odd semester"

    # Editors still cannot delete timetables or manage group links.
    assert client.delete(f"/api/timetables/{timetable_id}", headers=ctx["anita"]).status_code == 403
    assert (
        client.delete(f"/api/timetables/{timetable_id}/groups/{ctx['group']['id']}", headers=ctx["anita"]).status_code
        == 403
    )

    student_slot = client.post(f"/api/timetables/{timetable_id}/slots", json=slot, headers=ctx["student"])
    assert student_slot.status_code == 403


def test_group_default_editor_role_grants_edit(client):
    ctx = _setup(client, default_role="Editor")
    timetable_id = ctx["timetable"]["id"]

    assert client.get(f"/api/timetables/{timetable_id}/can-edit", headers=ctx["student"]).json()["can_edit"] is True
    assert client.get(f"/api/timetables/{timetable_id}/can-edit", headers=ctx["outsider"]).json()["can_edit"] is False


def test_slot_validation(client):
    ctx = _setup(client)
    path = f"/api/timetables/{ctx['timetable']['id']}/slots"
    lecture_id = ctx["lecture"]["id"]

    reversed_times = client.post(
        path, json=_slot_payload(lecture_id, start_time="10:00", end_time="09:00"), headers=ctx["hod"]
    )
    assert reversed_times.status_code == 422
    assert "Start time must be before end time" in reversed_times.text

    bad_hour = client.post(path, json=_slot_payload(lecture_id, start_time="25:00"), headers=ctx["hod"])
    assert bad_hour.status_code == 422
    bad_day = client.post(path, json=_slot_payload(lecture_id, day="Funday"), headers=ctx["hod"])
    assert bad_day.status_code == 422

    unknown_type = client.post(path, json=_slot_payload("missing"), headers=ctx["hod"])
    assert unknown_type.status_code == 400

    student_as_faculty = client.post(
        path,
        json=_slot_payload(lecture_id, faculty_id=ctx_user_id(client, ctx["student"])),
        headers=ctx["hod"],
    )
    assert student_as_faculty.status_code == 400

    blank_refs = client.post(
        path,
        json=_slot_payload(lecture_id, start_time="8:30", end_time="9:20", subject_id="", room_id="  "),
        headers=ctx["hod"],
    )
    assert blank_refs.status_code == 201
    slot = blank_refs.json()
    assert (slot["start_time"], slot["end_time"]) == ("08:30", "09:20")
    assert slot["subject_id"] is None
    assert slot["room_id"] is None
    assert slot["slot_type"]["name"] == "Lecture"

    updated = client.put(
        f"/api/timetables/slots/{slot['id']}",
        json=_slot_payload(lecture_id, day="Wednesday", start_time="11:00", end_time="12:00"),
        headers=ctx["hod"],
    )
    assert updated.status_code == 200
    assert updated.json()["day"] == "Wednesday"

    assert client.delete(f"/api/timetables/slots/{slot['id']}", headers=ctx["student"]).status_code == 403
    assert client.delete(f"/api/timetables/slots/{slot['id']}", headers=ctx["hod"]).status_code == 200
    assert client.delete(f"/api/timetables/slots/{slot['id']}", headers=ctx["hod"]).status_code == 404


def ctx_user_id(client, headers):
    return client.get("/api/auth/me", headers=headers).json()["id"]


def test_slots_are_ordered_by_day_then_start(client):
    ctx = _setup(client)
    timetable_id = ctx["timetable"]["id"]
    path = f"/api/timetables/{timetable_id}/slots"
    lecture_id = ctx["lecture"]["id"]
    for day, start, end in [("Friday", "09:00", "10:00"), ("Monday", "11:00", "12:00"), ("Monday", "9:00", "10:00")]:
        response = client.post(
            path,
            json=_slot_payload(lecture_id, day=day, start_time=start, end_time=end),
            headers=ctx["hod"],
        )
        assert response.status_code == 201

    slots = client.get(f"/api/timetables/{timetable_id}", headers=ctx["student"]).json()["slots"]
    assert [(slot["day"], slot["start_time"]) for slot in slots] == [
        ("Monday", "09:00"),
        ("Monday", "11:00"),
        ("Friday", "09:00"),
    ]


def test_group_assignment_and_delete_cascade(client):
    ctx = _setup(client)
    timetable_id = ctx["timetable"]["id"]
    group_id = ctx["group"]["id"]

    duplicate = client.post(f"/api/timetables/{timetable_id}/groups/{group_id}", headers=ctx["hod"])
    assert duplicate.status_code == 409
    assert client.post(f"/api/timetables/{timetable_id}/groups/missing", headers=ctx["hod"]).status_code == 404

    slot = client.post(
        f"/api/timetables/{timetable_id}/slots",
        json=_slot_payload(ctx["lecture"]["id"]),
        headers=ctx["hod"],
    ).json()

    assert client.delete(f"/api/timetables/{timetable_id}", headers=ctx["hod"]).status_code == 200
    assert client.get("/api/timetables/", headers=ctx["student"]).json() == []
    assert client.delete(f"/api/timetables/slots/{slot['id']}", headers=ctx["hod"]).status_code == 404
    assert client.delete(f"/api/timetables/{timetable_id}", headers=ctx["hod"]).status_code == 404


def test_unassigning_group_revokes_access(client):
    ctx = _setup(client)
    timetable_id = ctx["timetable"]["id"]
    group_id = ctx["group"]["id"]

    removed = client.delete(f"/api/timetables/{timetable_id}/groups/{group_id}", headers=ctx["hod"])
    assert removed.status_code == 200
    assert client.get(f"/api/timetables/{timetable_id}", headers=ctx["student"]).status_code == 404
    again = client.delete(f"/api/timetables/{timetable_id}/groups/{group_id}", headers=ctx["hod"])
    assert again.status_code == 404


def test_lookup_options(client):
    ctx = _setup(client)

    faculty = client.get("/api/timetables/options/faculty", headers=ctx["student"])
    assert faculty.status_code == 200
    assert [item["name"] for item in faculty.json()] == ["Anita Rao", "Head Of Dept", "Outsider"]

    assert client.get("/api/timetables/options/groups", headers=ctx["student"]).status_code == 403
    groups = client.get("/api/timetables/options/groups", headers=ctx["hod"]).json()
    assert [item["title"] for item in groups] == ["CSE A"]
