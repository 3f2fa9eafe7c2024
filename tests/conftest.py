"""
Shared pytest fixtures.

The storage singleton is built when ``models`` is first imported, so the
environment is pointed at an in-memory SQLite database before any app import.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "testing"
os.environ["PLATFORM"] = "dev"
os.environ["JWT_SECRET"] = "testing-secret-that-is-long-enough-for-hs256"
os.environ["POLKA_KEY"] = "f271c81ff7084ee5b99a5091b42d486e"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest

from api import create_app
from models import storage
from utils.metrics import hits

JWT_SECRET = os.environ["JWT_SECRET"]
POLKA_KEY = os.environ["POLKA_KEY"]


@pytest.fixture(autouse=True)
def clean_storage():
    """Every test starts with no users and a zeroed hit counter."""
    storage.delete_all_users()
    hits.reset()
    yield
    storage.close()


@pytest.fixture
def app():
    return create_app("testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """Register an account through the API and return its JSON."""
    def _register(email="walt@breakingbad.com", password="04234"):
        resp = client.post("/api/users", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _register


@pytest.fixture
def login(client):
    """Log in through the API and return the JSON (includes both tokens)."""
    def _login(email="walt@breakingbad.com", password="04234"):
        resp = client.post("/api/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()

    return _login


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
