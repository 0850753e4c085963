"""Main FastAPI application"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional, Set, Tuple
import logging
import re
import time
import traceback
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.routing import APIRoute
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import compile_path

from tbs.config import Settings, get_settings
from tbs.container import build_container
from tbs.core.database import init_db
from tbs.core.exceptions import BaseAPIException
from tbs.core.logging import configure_logging
from tbs.schemas.response import HealthResponse
from tbs.api.routes import auth, users, staff, projects, contractors, tasks, photos, calendar, metrics

logger = logging.getLogger("tbs.api")

REQUEST_COUNT = Counter(
    "tbs_http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)
REQUEST_LATENCY = Histogram(
    "tbs_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
)


ROUTERS = (
    (auth.router, "/api/auth", "Authentication"),
    (users.router, "/api", "Users"),
    (staff.router, "/api/staff", "Staff"),
    (projects.router, "/api/projects", "Projects"),
    (contractors.router, "/api/contractors", "Contractors"),
    (tasks.router, "/api/tasks", "Tasks"),
    (photos.router, "/api/photos", "Photos"),
    (calendar.router, "/api/calendar", "Calendar"),
    (metrics.router, "/api/metrics", "Metrics"),
)

RouteTemplate = Tuple[re.Pattern, Set[str], str]


def _route_templates(app: FastAPI) -> List[RouteTemplate]:
    """Full path templates of the app's own routes and of every included router"""
    templates: List[RouteTemplate] = [
        (route.path_regex, route.methods, route.path)
        for route in app.router.routes
        if isinstance(route, APIRoute)
    ]
    for router, prefix, _tag in ROUTERS:
        for route in router.routes:
            if isinstance(route, APIRoute):
                template = prefix + route.path
                path_regex, _, _ = compile_path(template)
                templates.append((path_regex, route.methods, template))
    return templates


def _route_template(request: Request) -> str:
    """
    Path template serving this request, so metrics labels stay bounded

    A method mismatch still reports the template of the path it hit.
    """
    path = request.scope["path"]
    partial = None
    for path_regex, methods, template in getattr(request.app.state, "route_templates", ()):
        if path_regex.match(path):
            if request.method in methods:
                return template
            partial = partial or template
    return partial or "unmatched"


def _error_body(message: str, details=None) -> dict:
    body = {"error": message}
    if details:
        body["details"] = details
    return body


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(BaseAPIException)
    async def api_exception_handler(request: Request, exc: BaseAPIException):
        """Handle custom API exceptions"""
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            f"API Exception: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.details))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors"""
        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
                "message": error["msg"],
                "type": error["type"],
            })

        first = errors[0] if errors else {"field": "", "message": "Invalid request"}
        message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]

        logger.warning(
            f"Validation error: {message}",
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(message, errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors"""
        logger.error(
            f"Database error: {exc}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "traceback": traceback.format_exc(),
            },
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("A database error occurred. Please try again later."),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions"""
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.critical(
            f"Unhandled exception: {exc}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "traceback": stack,
            },
        )
        body = _error_body("Server error")
        if not settings.is_production:
            body["stack"] = stack
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build an application instance

    Args:
        settings: Explicit settings; read from the environment when omitted

    Returns:
        Configured FastAPI app with its container on ``app.state``
    """
    settings = settings or get_settings()
    configure_logging(settings)
    container = build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.validate_security_settings()
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

        try:
            init_db(container.engine, settings.DB_INIT_MODE)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

        if settings.SEED_DEMO_USERS:
            db = container.session_factory()
            try:
                container.user_service.seed_demo_users(db, settings.DEMO_USER_PASSWORD)
            finally:
                db.close()

        yield

        container.dispose()
        logger.info(f"Shutting down {settings.APP_NAME}")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.container = container

    # GZip compression for large responses
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Credentials are needed for the refresh cookie
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers, request id, timing, request log and metrics
    @app.middleware("http")
    async def add_headers_and_timing(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["X-Request-ID"] = request_id

        route = _route_template(request)
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(request.method, route).observe(duration)

        logger.info(
            "%s %s %s",
            request.method,
            route,
            response.status_code,
            extra={
                "request_id": request_id,
                "method": request.method,
                "route": route,
                "status": response.status_code,
                "duration_ms": round(duration * 1000, 2),
                "user_id": getattr(request.state, "user_id", None),
            },
        )
        if duration > 1.0:
            logger.warning(
                "Slow request: %s %s took %.2fs request_id=%s",
                request.method,
                route,
                duration,
                request_id,
            )

        return response

    _register_exception_handlers(app, settings)

    @app.get("/api/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint"""
        db_ok = True
        db_error = None
        db = container.session_factory()
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            db_ok = False
            db_error = str(exc)
        finally:
            db.close()

        return HealthResponse(
            status="OK" if db_ok else "DEGRADED",
            version=settings.APP_VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
            database={"ok": db_ok, "error": db_error},
        )

    @app.get("/metrics", include_in_schema=False)
    def prometheus_metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, prefix, tag in ROUTERS:
        app.include_router(router, prefix=prefix, tags=[tag])
    app.state.route_templates = _route_templates(app)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "tbs.main:app",
        host=_settings.HOST,
        port=_settings.PORT,
        reload=_settings.DEBUG,
        workers=1 if _settings.DEBUG else _settings.WORKERS,
    )
