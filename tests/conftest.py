from datetime import datetime

import pytest

from moodease import clock, create_app
from moodease.models import db

SECRET = "test-signing-key-that-is-long-enough-for-hs256"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///" + str(tmp_path / "moodease-test.db"),
        "JWT_SECRET_KEY": SECRET,
        "BCRYPT_LOG_ROUNDS": 4,
        "DAY_TIMEZONE": "UTC",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def frozen_clock(monkeypatch):
    """Set the application clock; call with a naive UTC datetime."""
    state = {"now": datetime(2026, 3, 2, 10, 0, 0)}

    def set_time(moment):
        state["now"] = moment

    monkeypatch.setattr(clock, "utcnow", lambda: state["now"])
    return set_time


def register(client, username="ana", email="ana@x.com", password="secret1"):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )


def bearer(token):
    return {"Authorization": "Bearer " + token}


@pytest.fixture
def auth(client):
    """Bearer headers for a freshly registered account."""
    res = register(client)
    assert res.status_code == 200
    return bearer(res.get_json()["token"])


@pytest.fixture
def other_auth(client):
    res = register(client, username="ben", email="ben@x.com", password="secret2")
    assert res.status_code == 200
    return bearer(res.get_json()["token"])
