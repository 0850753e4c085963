"""Composition root - builds the services an application instance runs on"""

from dataclasses import dataclass
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from tbs.config import Settings
from tbs.core.database import build_engine, build_session_factory
from tbs.services.auth_service import AuthService
from tbs.services.calendar_service import CalendarService
from tbs.services.contractor_service import ContractorService
from tbs.services.metrics_service import MetricsService
from tbs.services.photo_service import PhotoService
from tbs.services.project_service import ProjectService
from tbs.services.rate_limiter import InMemoryRateLimiter
from tbs.services.task_service import TaskService
from tbs.services.token_service import TokenService, TokenSettings
from tbs.services.user_service import UserService


@dataclass
class Container:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    project_service: ProjectService
    contractor_service: ContractorService
    task_service: TaskService
    photo_service: PhotoService
    calendar_service: CalendarService
    metrics_service: MetricsService
    rate_limiter: InMemoryRateLimiter

    def dispose(self) -> None:
        self.engine.dispose()


def build_container(settings: Settings) -> Container:
    """
    Wire engine, session factory and services for one application

    Args:
        settings: Explicit application settings

    Returns:
        Container with every service constructed once
    """
    engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    token_service = TokenService(TokenSettings.from_settings(settings))

    return Container(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        token_service=token_service,
        auth_service=AuthService(token_service, logger=logging.getLogger("tbs.auth")),
        user_service=UserService(settings.BCRYPT_ROUNDS, logger=logging.getLogger("tbs.staff")),
        project_service=ProjectService(logger=logging.getLogger("tbs.projects")),
        contractor_service=ContractorService(logger=logging.getLogger("tbs.contractors")),
        task_service=TaskService(logger=logging.getLogger("tbs.tasks")),
        photo_service=PhotoService(logger=logging.getLogger("tbs.photos")),
        calendar_service=CalendarService(logger=logging.getLogger("tbs.calendar")),
        metrics_service=MetricsService(logger=logging.getLogger("tbs.metrics")),
        rate_limiter=InMemoryRateLimiter(),
    )
