import os

# Cheap hashes for the test run; read when the auth module builds its CryptContext
os.environ.setdefault("bcrypt_rounds", "4")

import fakeredis
import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect

from app.connections.redis import set_redis
from app.models.feedback import Feedback
from app.models.order import Order
from app.models.user import User
from app.utils.config import settings
from main import app


@pytest.fixture(autouse=True)
def mongo():
    connect(
        "feedback_test",
        host="mongodb://localhost",
        alias="default",
        mongo_client_class=mongomock.MongoClient,
        tz_aware=True,
    )
    yield
    for document in (User, Feedback, Order):
        document.drop_collection()
    disconnect(alias="default")


@pytest.fixture(autouse=True)
def redis_client():
    client = fakeredis.FakeRedis(decode_responses=True)
    set_redis(client)
    yield client
    set_redis(None)


@pytest.fixture(autouse=True)
def mirror_path(tmp_path, monkeypatch):
    path = tmp_path / "feedback.xlsx"
    monkeypatch.setattr(settings, "feedback_excel_path", str(path))
    monkeypatch.setattr(settings, "feedback_store_enabled", True)
    monkeypatch.setattr(settings, "feedback_requires_auth", False)
    return path


@pytest.fixture
def client():
    return TestClient(app)


def signup(client, name="Ann Lee", email="ann@x.com", password="secret1", confirm=None):
    return client.post(
        "/api/auth/signup",
        json={
            "name": name,
            "email": email,
            "password": password,
            "confirmPassword": password if confirm is None else confirm,
        },
    )


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signed_up(client):
    """A registered user: (token, user payload)."""
    response = signup(client)
    assert response.status_code == 201
    body = response.json()
    return body["token"], body["user"]
