from campussync.core.config import get_settings


def _register_payload(**overrides):
    payload = {
        "name": "Anita Rao",
        "email": "anita@example.com",
        "role": "Faculty",
        "password": "password123",
        "confirm_password": "password123",
    }
    payload.update(overrides)
    return payload


def test_register_login_me(client):
    register_response = client.post("/api/auth/register", json=_register_payload(email="Anita@Example.com"))
    assert register_response.status_code == 201
    data = register_response.json()
    assert data["email"] == "anita@example.com"
    assert data["role"] == "Faculty"
    assert data["availability"] == "Active"
    assert data["status"] is None
    assert "hashed_password" not in data

    login_response = client.post("/api/auth/login", json={"email": "anita@example.com", "password": "password123"})
    assert login_response.status_code == 200
    login_data = login_response.json()
    assert login_data["token_type"] == "bearer"

    me_response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {login_data['access_token']}"})
    assert me_response.status_code == 200
    assert me_response.json()["id"] == data["id"]


def test_register_rejects_duplicates_and_bad_input(client):
    assert client.post("/api/auth/register", json=_register_payload()).status_code == 201

    duplicate = client.post("/api/auth/register", json=_register_payload(name="Someone Else"))
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "User with this email already exists"

    mismatch = client.post(
        "/api/auth/register",
        json=_register_payload(email="other@example.com", confirm_password="different"),
    )
    assert mismatch.status_code == 422

    short = client.post(
        "/api/auth/register",
        json=_register_payload(email="short@example.com", password="abc", confirm_password="abc"),
    )
    assert short.status_code == 422

    bad_role = client.post("/api/auth/register", json=_register_payload(email="role@example.com", role="Admin"))
    assert bad_role.status_code == 422


def test_login_rejects_wrong_credentials(client):
    client.post("/api/auth/register", json=_register_payload())

    wrong_password = client.post("/api/auth/login", json={"email": "anita@example.com", "password": "nope"})
    assert wrong_password.status_code == 401
    assert wrong_password.json()["detail"] == "Invalid email or password"

    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "password123"})
    assert unknown.status_code == 401


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_profile_updates(client):
    client.post("/api/auth/register", json=_register_payload())
    token = client.post("/api/auth/login", json={"email": "anita@example.com", "password": "password123"}).json()[
        "access_token"
    ]
    headers = {"Authorization": f"Bearer {token}"}

    renamed = client.patch("/api/auth/me/name", json={"name": "  Dr. Anita Rao  "}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Dr. Anita Rao"

    assert client.patch("/api/auth/me/name", json={"name": "   "}, headers=headers).status_code == 422
    assert client.patch("/api/auth/me/name", json={"name": "x" * 101}, headers=headers).status_code == 422

    away = client.patch("/api/auth/me/availability", json={"availability": "Away"}, headers=headers)
    assert away.status_code == 200
    assert away.json()["availability"] == "Away"
    assert client.patch("/api/auth/me/availability", json={"availability": "Gone"}, headers=headers).status_code == 422

    status_set = client.patch("/api/auth/me/status", json={"status": " In a meeting "}, headers=headers)
    assert status_set.json()["status"] == "In a meeting"
    cleared = client.patch("/api/auth/me/status", json={"status": "  "}, headers=headers)
    assert cleared.status_code == 200
    assert cleared.json()["status"] is None
    assert client.patch("/api/auth/me/status", json={"status": "s" * 101}, headers=headers).status_code == 422


def test_login_is_rate_limited(client):
    client.post("/api/auth/register", json=_register_payload())
    limit = get_settings().auth_rate_limit_login_max_requests

    for _ in range(limit):
        response = client.post("/api/auth/login", json={"email": "anita@example.com", "password": "wrong"})
        assert response.status_code == 401

    blocked = client.post("/api/auth/login", json={"email": "anita@example.com", "password": "password123"})
    assert blocked.status_code == 429
    assert "Retry-After" in blocked.headers
