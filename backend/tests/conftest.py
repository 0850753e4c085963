"""Shared fixtures: an app per test on in-memory SQLite with the demo users seeded."""

from http.cookies import SimpleCookie

import pytest
from fastapi.testclient import TestClient

from tbs.config import Settings
from tbs.main import create_app

ACCESS_SECRET = "test-access-secret-0123456789abcdef0123"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012"
DEMO_PASSWORD = "password123"


def make_settings(**overrides) -> Settings:
    values = {
        "ENVIRONMENT": "test",
        "DATABASE_URL": "sqlite://",
        "DB_INIT_MODE": "create_all",
        "BCRYPT_ROUNDS": 4,
        "JWT_ACCESS_SECRET": ACCESS_SECRET,
        "JWT_REFRESH_SECRET": REFRESH_SECRET,
        "SEED_DEMO_USERS": True,
        "DEMO_USER_PASSWORD": DEMO_PASSWORD,
        "LOG_LEVEL": "INFO",
        "LOG_FILE": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def refresh_cookie(response) -> SimpleCookie:
    """Parsed ``Set-Cookie`` header of a response"""
    cookie = SimpleCookie()
    cookie.load(response.headers["set-cookie"])
    return cookie


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def container(app):
    return app.state.container


@pytest.fixture
def client(app):
    # https so the Secure refresh cookie round-trips through the cookie jar
    with TestClient(app, base_url="https://testserver") as test_client:
        yield test_client


@pytest.fixture
def db(client, container):
    session = container.session_factory()
    try:
        yield session
    finally:
        session.close()


def login(client, email: str, password: str = DEMO_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def auth_headers(client, email: str = "danny@tbs.local") -> dict:
    response = login(client, email)
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def admin_headers(client):
    return auth_headers(client, "danny@tbs.local")


@pytest.fixture
def foreman_headers(client):
    return auth_headers(client, "pat@tbs.local")


@pytest.fixture
def labourer_headers(client):
    return auth_headers(client, "charlie@tbs.local")
