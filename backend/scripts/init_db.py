"""
Prepare the TBS database.
Run before the first start, or after pulling new migrations: python scripts/init_db.py

Applies pending Alembic migrations to DATABASE_URL and, when
SEED_DEMO_USERS is enabled, inserts the demo accounts into an empty
Users table. Safe to run repeatedly.
"""

import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from tbs.config import get_settings
from tbs.container import build_container
from tbs.core.database import run_migrations
from tbs.core.logging import configure_logging


def main() -> int:
    settings = get_settings()
    log = configure_logging(settings)
    container = build_container(settings)

    try:
        run_migrations(container.engine)
        log.info("Migrations applied to %s", container.engine.url.render_as_string(hide_password=True))

        if settings.SEED_DEMO_USERS:
            db = container.session_factory()
            try:
                added = container.user_service.seed_demo_users(db, settings.DEMO_USER_PASSWORD)
            finally:
                db.close()
            log.info("Demo users added: %d", added)
    except SQLAlchemyError as e:
        log.error("Cannot prepare database: %s", e)
        return 1
    finally:
        container.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
