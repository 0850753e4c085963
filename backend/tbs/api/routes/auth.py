"""Authentication routes - login, refresh and logout"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from tbs.config import Settings
from tbs.container import Container
from tbs.core.database import get_db
from tbs.core.exceptions import InvalidCredentialsError, TokenRevokedError
from tbs.schemas.user import AccessTokenResponse, LoginRequest, LoginResponse, SessionUserResponse
from tbs.schemas.response import OkResponse
from tbs.services.auth_service import AuthFailure, AuthService
from tbs.services.rate_limiter import RateLimit
from tbs.api.deps import get_auth_service, get_container

router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _login_limits(settings: Settings):
    return (
        RateLimit("login:min", settings.LOGIN_RATE_LIMIT_PER_MINUTE, 60,
                  "Too many login attempts. Please wait a minute."),
        RateLimit("login:hour", settings.LOGIN_RATE_LIMIT_PER_HOUR, 3600,
                  "Too many login attempts. Please try again later."),
    )


def _refresh_limits(settings: Settings):
    return (
        RateLimit("refresh:min", settings.REFRESH_RATE_LIMIT_PER_MINUTE, 60,
                  "Too many refresh attempts. Please wait a minute."),
        RateLimit("refresh:hour", settings.REFRESH_RATE_LIMIT_PER_HOUR, 3600,
                  "Too many refresh attempts. Please try again later."),
    )


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login(
    credentials: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    container: Container = Depends(get_container),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password

    Returns the access token in the body and sets the refresh token as an
    HttpOnly cookie scoped to the auth routes.
    """
    settings = container.settings
    container.rate_limiter.enforce(f"{_client_ip(request)}:{credentials.email}", _login_limits(settings))

    result = auth_service.login(db, credentials.email, credentials.password)
    if isinstance(result, AuthFailure):
        raise InvalidCredentialsError()

    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=result.refresh_token,
        max_age=int(container.token_service.refresh_ttl.total_seconds()),
        path=settings.REFRESH_COOKIE_PATH,
        secure=settings.REFRESH_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return LoginResponse(
        access_token=result.access_token,
        user=SessionUserResponse.model_validate(result.user),
    )


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(
    request: Request,
    db: Session = Depends(get_db),
    container: Container = Depends(get_container),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange the refresh cookie for a new access token"""
    settings = container.settings
    container.rate_limiter.enforce(_client_ip(request), _refresh_limits(settings))

    result = auth_service.rotate(db, request.cookies.get(settings.REFRESH_COOKIE_NAME))
    if isinstance(result, AuthFailure):
        raise TokenRevokedError()

    return AccessTokenResponse(access_token=result.access_token)


@router.post("/logout", response_model=OkResponse)
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    container: Container = Depends(get_container),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Revoke the refresh cookie's token (if any) and clear the cookie"""
    settings = container.settings
    auth_service.logout(db, request.cookies.get(settings.REFRESH_COOKIE_NAME))

    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        path=settings.REFRESH_COOKIE_PATH,
        secure=settings.REFRESH_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return OkResponse()
