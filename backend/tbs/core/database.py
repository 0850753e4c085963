"""Database configuration and session management"""

from pathlib import Path
from typing import Generator
import logging

from alembic import command
from alembic.config import Config
from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# backend/
_BASE_DIR = Path(__file__).resolve().parent.parent.parent
ALEMBIC_DIR = _BASE_DIR / "alembic"
ALEMBIC_INI = _BASE_DIR / "alembic.ini"

_IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}

# Create base class for models
Base = declarative_base()


def in_list(column: str, values) -> str:
    """CHECK constraint body restricting a string column to an enumeration"""
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL

    SQLite connections get foreign key enforcement so that cascades on
    RefreshTokens, Tasks and Photos behave like on a server database.
    """
    kwargs = {"echo": echo, "pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in _IN_MEMORY_URLS:
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for getting a request-scoped database session

    Yields:
        Session: Database session
    """
    db = request.app.state.container.session_factory()
    try:
        yield db
    finally:
        db.close()


def alembic_config(database_url: str) -> Config:
    cfg = Config(str(ALEMBIC_INI)) if ALEMBIC_INI.exists() else Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def run_migrations(engine: Engine) -> None:
    """Apply pending migrations in order; already-applied revisions are skipped"""
    cfg = alembic_config(engine.url.render_as_string(hide_password=False))
    with engine.begin() as connection:
        cfg.attributes["connection"] = connection
        command.upgrade(cfg, "head")


def init_db(engine: Engine, mode: str) -> None:
    """
    Initialize database according to configured strategy.

    DB_INIT_MODE:
      - migrate: apply versioned Alembic migrations up to head
      - create_all: create tables from model metadata (local dev and tests)
      - off: skip initialization
    """
    # Import models so metadata is populated.
    from tbs import models  # noqa: F401

    mode = mode.lower().strip()
    if mode == "off":
        logger.info("DB initialization skipped (DB_INIT_MODE=off)")
        return

    if mode == "create_all":
        Base.metadata.create_all(bind=engine)
        logger.warning("Using create_all database initialization (recommended only for local development).")
        return

    if mode == "migrate":
        run_migrations(engine)
        logger.info("Database migrations applied.")
        return

    raise RuntimeError(f"Unknown DB_INIT_MODE: {mode}")
