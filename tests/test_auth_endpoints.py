from api.decorators import jwt_required
from api.extensions import get_services
from conftest import PASSWORD, bearer, login, register


def test_health(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_register_returns_user_and_tokens(client):
    resp = register(client)
    assert resp.status_code == 201

    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    data = body["data"]
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["name"] == "Alice"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]
    assert data["token"] and data["refresh_token"]


def test_register_duplicate_email(client):
    register(client)
    resp = register(client, name="Someone Else")
    assert resp.status_code == 409
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"] == "Email already exists"


def test_register_validation_envelope(client):
    resp = client.post("/api/v1/auth/register", json={"name": "A", "email": "bad", "password": "1"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert set(body["details"]) == {"name", "email", "password"}


def test_register_with_non_json_body(client):
    resp = client.post("/api/v1/auth/register", data="nope", content_type="text/plain")
    assert resp.status_code == 400


def test_login_success_and_failure(client):
    register(client)

    ok = login(client)
    assert ok.status_code == 200
    assert set(ok.get_json()["data"]) == {"token", "refresh_token"}

    wrong = login(client, password="wrong-password")
    unknown = login(client, email="ghost@example.com")
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json()["error"] == unknown.get_json()["error"]


def test_protected_route_requires_bearer(client, auth_headers):
    assert client.get("/api/v1/user/profile").status_code == 401
    assert client.get("/api/v1/user/profile", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get("/api/v1/user/profile", headers=bearer("garbage")).status_code == 401

    resp = client.get("/api/v1/user/profile", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["user"]["email"] == "alice@example.com"


def test_refresh_token_cannot_call_protected_routes(client):
    refresh = register(client).get_json()["data"]["refresh_token"]
    resp = client.get("/api/v1/user/profile", headers=bearer(refresh))
    assert resp.status_code == 401


def test_refresh_requires_token_field(client):
    resp = client.post("/api/v1/auth/refresh-token", json={})
    assert resp.status_code == 400
    assert "refresh_token" in resp.get_json()["details"]


def test_session_lifecycle(client):
    register(client)
    pair = login(client).get_json()["data"]

    rotated = client.post("/api/v1/auth/refresh-token", json={"refresh_token": pair["refresh_token"]})
    assert rotated.status_code == 200
    new_pair = rotated.get_json()["data"]
    assert new_pair["refresh_token"] != pair["refresh_token"]

    replay = client.post("/api/v1/auth/refresh-token", json={"refresh_token": pair["refresh_token"]})
    assert replay.status_code == 401
    assert replay.get_json()["success"] is False

    out = client.post("/api/v1/auth/logout", headers=bearer(new_pair["token"]))
    assert out.status_code == 200
    assert out.get_json()["message"] == "Logout successful"

    again = client.post("/api/v1/auth/logout", headers=bearer(new_pair["token"]))
    assert again.status_code == 200
    assert again.get_json()["message"] == "No active session found or already logged out"

    after = client.post("/api/v1/auth/refresh-token", json={"refresh_token": new_pair["refresh_token"]})
    assert after.status_code == 401


def test_logout_only_ends_its_own_session(client):
    register(client)
    first = login(client).get_json()["data"]
    second = login(client).get_json()["data"]

    client.post("/api/v1/auth/logout", headers=bearer(first["token"]))

    resp = client.post("/api/v1/auth/refresh-token", json={"refresh_token": second["refresh_token"]})
    assert resp.status_code == 200


def test_logout_all(client):
    first = register(client).get_json()["data"]
    second = login(client).get_json()["data"]

    resp = client.post("/api/v1/auth/logout-all", headers=bearer(second["token"]))
    assert resp.status_code == 200
    assert resp.get_json()["data"]["revoked"] == 2

    for pair in (first, second):
        r = client.post("/api/v1/auth/refresh-token", json={"refresh_token": pair["refresh_token"]})
        assert r.status_code == 401


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/v1/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_root_and_password_is_not_stored_plain(app, client):
    register(client, password=PASSWORD)
    assert client.get("/").status_code == 200

    with app.app_context():
        user = get_services().users.get_by_email("alice@example.com")
        assert user.password_hash != PASSWORD
        assert user.password_hash.startswith("$argon2")


def test_login_accepts_padded_email_like_register(client):
    assert register(client, email=" alice@example.com ").status_code == 201
    resp = login(client, email=" alice@example.com ")
    assert resp.status_code == 200


def test_jwt_required_passes_identity_to_view(app, client):
    @app.get("/api/v1/whoami")
    @jwt_required()
    def whoami(identity):
        return {"user_id": identity.user_id, "email": identity.email, "jti": identity.jti}

    data = register(client).get_json()["data"]
    resp = client.get("/api/v1/whoami", headers=bearer(data["token"]))
    assert resp.status_code == 200
    assert resp.get_json() == {
        "user_id": data["user"]["id"],
        "email": "alice@example.com",
        "jti": access_jti(app, data["token"]),
    }
    assert client.get("/api/v1/whoami").status_code == 401


def access_jti(app, token):
    with app.app_context():
        return get_services().tokens.validate_access(token).jti
