import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from tbs.core.database import build_engine, init_db
from tbs.main import create_app

from conftest import DEMO_PASSWORD, make_settings


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'tbs.sqlite'}")
    yield engine
    engine.dispose()


def test_migrations_create_schema_and_are_idempotent(engine):
    init_db(engine, "migrate")
    # Reboot: nothing left to apply
    init_db(engine, "migrate")

    tables = set(inspect(engine).get_table_names())
    assert {
        "alembic_version",
        "users",
        "refresh_tokens",
        "projects",
        "contractors",
        "tasks",
        "photos",
        "calendar_events",
    } <= tables

    with engine.connect() as conn:
        versions = conn.execute(text("SELECT version_num FROM alembic_version")).scalars().all()
    assert versions == ["202610030001"]


def test_migrated_schema_enforces_role_check(engine):
    init_db(engine, "migrate")

    with engine.connect() as conn:
        with pytest.raises(IntegrityError):
            conn.execute(text(
                "INSERT INTO users (name, email, role, password_hash) "
                "VALUES ('X', 'x@tbs.local', 'owner', 'h')"
            ))


def test_unknown_init_mode_is_rejected(engine):
    with pytest.raises(RuntimeError):
        init_db(engine, "drop_everything")


def test_app_boots_on_migrated_database(tmp_path):
    settings = make_settings(DATABASE_URL=f"sqlite:///{tmp_path / 'app.sqlite'}", DB_INIT_MODE="migrate")

    with TestClient(create_app(settings), base_url="https://testserver") as client:
        response = client.post("/api/auth/login", json={"email": "danny@tbs.local", "password": DEMO_PASSWORD})
        assert response.status_code == 200
        assert client.post("/api/auth/refresh").status_code == 200
