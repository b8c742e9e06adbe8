from datetime import timedelta

from flask_jwt_extended import create_access_token, decode_token

from moodease import accounts
from moodease.models import User
from tests.conftest import bearer, register


def test_register_returns_token_and_profile(client):
    res = register(client)
    assert res.status_code == 200
    body = res.get_json()
    assert body["profile"]["username"] == "ana"
    assert body["profile"]["email"] == "ana@x.com"
    assert "password" not in body["profile"]
    assert decode_token(body["token"])["sub"] == str(body["profile"]["id"])


def test_password_is_stored_hashed(client):
    register(client)
    user = User.query.filter_by(email="ana@x.com").one()
    assert user.password != "secret1"
    assert user.password.startswith("$2")


def test_register_then_login_yields_same_identity(client):
    token_a = register(client).get_json()["token"]
    res = client.post("/api/auth/login", json={"email": "ana@x.com", "password": "secret1"})
    assert res.status_code == 200
    token_b = res.get_json()["token"]

    assert token_a != token_b
    assert decode_token(token_a)["sub"] == decode_token(token_b)["sub"]


def test_register_duplicate_email_is_rejected(client):
    register(client)
    res = register(client, username="other")
    assert res.status_code == 400
    assert res.get_json() == {"error": "Email already taken"}
    assert User.query.count() == 1


def test_register_duplicate_username_is_rejected(client):
    register(client)
    res = register(client, email="second@x.com")
    assert res.status_code == 400
    assert res.get_json() == {"error": "Username already taken"}


def test_register_missing_fields(client):
    res = client.post("/api/auth/register", json={"email": "ana@x.com"})
    assert res.status_code == 400
    assert "username" in res.get_json()["error"]


def test_register_non_json_body(client):
    res = client.post("/api/auth/register", data="nope", content_type="text/plain")
    assert res.status_code == 400


def test_login_wrong_password(client):
    register(client)
    res = client.post("/api/auth/login", json={"email": "ana@x.com", "password": "wrong"})
    assert res.status_code == 401
    assert res.get_json() == {"error": "Invalid credentials"}


def test_login_unknown_email(client):
    res = client.post("/api/auth/login", json={"email": "nobody@x.com", "password": "secret1"})
    assert res.status_code == 401


def test_token_expires_one_hour_after_issue(client):
    token = register(client).get_json()["token"]
    claims = decode_token(token)
    assert claims["exp"] - claims["iat"] == 3600


def test_missing_token_is_unauthorized(client):
    res = client.get("/api/moods")
    assert res.status_code == 401
    assert res.get_json() == {"error": "Authorization token required"}


def test_bad_signature_is_forbidden(client, auth):
    header, payload, signature = auth["Authorization"][len("Bearer "):].split(".")
    tampered = ".".join([header, payload, signature[::-1]])
    res = client.get("/api/moods", headers=bearer(tampered))
    assert res.status_code == 403
    assert res.get_json() == {"error": "Invalid token"}


def test_garbage_token_is_forbidden(client):
    res = client.get("/api/moods", headers=bearer("not-a-jwt"))
    assert res.status_code == 403


def test_expired_token_is_forbidden(app, client):
    register(client)
    user = User.query.one()
    token = create_access_token(identity=str(user.id), expires_delta=timedelta(seconds=-1))
    res = client.get("/api/moods", headers=bearer(token))
    assert res.status_code == 403
    assert res.get_json() == {"error": "Token has expired"}


def test_token_within_lifetime_is_accepted(app, client):
    register(client)
    user = User.query.one()
    token = create_access_token(identity=str(user.id), expires_delta=timedelta(seconds=5))
    assert client.get("/api/moods", headers=bearer(token)).status_code == 200


def test_gate_covers_every_protected_resource(client):
    for method, path in [
        ("get", "/api/moods"),
        ("post", "/api/moods"),
        ("delete", "/api/moods/1"),
        ("get", "/api/challenges"),
        ("put", "/api/challenges/1"),
        ("get", "/api/posts"),
        ("post", "/api/posts"),
        ("delete", "/api/posts/1"),
        ("put", "/api/posts/1/react"),
        ("get", "/api/profile/stats"),
        ("put", "/api/profile"),
    ]:
        res = getattr(client, method)(path)
        assert res.status_code == 401, (method, path)


def test_register_losing_race_on_unique_email(client, monkeypatch):
    register(client)
    real_check = accounts._ensure_available
    calls = []

    def check_after_first(email, username):
        # the first check runs before the competing row is visible
        calls.append(email)
        if len(calls) > 1:
            real_check(email=email, username=username)

    monkeypatch.setattr(accounts, "_ensure_available", check_after_first)
    res = register(client, username="ana2")
    assert res.status_code == 400
    assert res.get_json() == {"error": "Email already taken"}
    assert User.query.count() == 1
