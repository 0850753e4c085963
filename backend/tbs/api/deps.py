"""API dependencies - services, authentication and authorization"""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Callable, Iterable, Optional

from tbs.container import Container
from tbs.core.exceptions import AuthenticationError, AuthorizationError
from tbs.core.security import Identity
from tbs.schemas.user import UserRole
from tbs.services.auth_service import AuthService
from tbs.services.calendar_service import CalendarService
from tbs.services.contractor_service import ContractorService
from tbs.services.metrics_service import MetricsService
from tbs.services.photo_service import PhotoService
from tbs.services.project_service import ProjectService
from tbs.services.rate_limiter import InMemoryRateLimiter
from tbs.services.task_service import TaskService
from tbs.services.token_service import TokenService
from tbs.services.user_service import UserService

# HTTP Bearer token scheme; missing headers are reported as 401 below
bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_token_service(container: Container = Depends(get_container)) -> TokenService:
    return container.token_service


def get_auth_service(container: Container = Depends(get_container)) -> AuthService:
    return container.auth_service


def get_user_service(container: Container = Depends(get_container)) -> UserService:
    return container.user_service


def get_project_service(container: Container = Depends(get_container)) -> ProjectService:
    return container.project_service


def get_contractor_service(container: Container = Depends(get_container)) -> ContractorService:
    return container.contractor_service


def get_task_service(container: Container = Depends(get_container)) -> TaskService:
    return container.task_service


def get_photo_service(container: Container = Depends(get_container)) -> PhotoService:
    return container.photo_service


def get_calendar_service(container: Container = Depends(get_container)) -> CalendarService:
    return container.calendar_service


def get_metrics_service(container: Container = Depends(get_container)) -> MetricsService:
    return container.metrics_service


def get_rate_limiter(container: Container = Depends(get_container)) -> InMemoryRateLimiter:
    return container.rate_limiter


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Authenticate the caller from the ``Authorization: Bearer`` header

    The access token is trusted on its own; no database lookup is made.

    Returns:
        Identity decoded from the token

    Raises:
        AuthenticationError: Header missing or not a bearer token
        TokenInvalidError: Signature, expiry or claims rejected
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError()

    claims = token_service.verify_access_token(credentials.credentials)
    identity = Identity.from_claims(claims)

    request.state.identity = identity
    request.state.user_id = identity.id
    return identity


def ensure_role(identity: Optional[Identity], allowed: Iterable[str]) -> Identity:
    """
    Check an identity against an allow-list of roles

    An empty allow-list admits every authenticated role.

    Raises:
        AuthenticationError: No identity
        AuthorizationError: Role not in the allow-list
    """
    if identity is None:
        raise AuthenticationError()
    allowed = set(allowed)
    if allowed and identity.role not in allowed:
        raise AuthorizationError()
    return identity


def require_roles(*roles: str) -> Callable[..., Identity]:
    """
    Dependency factory restricting a route to some roles

    Usage:
        @router.post("", dependencies=[Depends(require_roles("admin"))])
    """
    allowed = frozenset(UserRole(role).value for role in roles)

    def role_guard(identity: Identity = Depends(get_current_identity)) -> Identity:
        return ensure_role(identity, allowed)

    return role_guard
