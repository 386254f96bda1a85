"""
api/main.py -- FastAPI application factory for TaskList.

Run with:      uvicorn asgi:app --reload
               python main.py

create_app(settings) builds a fully wired application from an explicit
Settings object. Nothing in api/, auth/, or tasks/ reads configuration at
import time, so tests can build as many isolated apps as they like, each with
its own database and secret.

Middleware stack (outermost to innermost):
  1. log_requests   -- one log line per request with status and latency
  2. CORSMiddleware -- adds CORS headers for the configured browser origins
  3. require_bearer -- rejects unauthenticated task requests before FastAPI
                       reads the body, so a malformed body never outranks 401

Lifespan handles startup (open stores, build services) and shutdown (close
stores) symmetrically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.tasks import router as tasks_router
from auth.guard import AccessGuard
from auth.service import CredentialService
from auth.store import UserStore
from core.config import Settings, get_settings
from core.errors import AuthenticationError, StorageError, TaskListError
from tasks.store import TaskStore

VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("tasklist.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def _make_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open both stores and build the services into app.state.

        Stores are opened here rather than in create_app() so that building
        an app object never touches the database; only starting it does.
        """
        logger.info("TaskList API starting up")
        app.state.user_store = UserStore(settings.database_url)
        app.state.task_store = TaskStore(settings.database_url)
        app.state.credentials = CredentialService(
            app.state.user_store,
            secret_key=settings.secret_key,
            token_ttl=settings.token_expire_seconds,
            bcrypt_rounds=settings.bcrypt_rounds,
        )
        app.state.guard = AccessGuard(settings.secret_key)
        logger.info("Stores initialized")

        yield

        app.state.task_store.close()
        app.state.user_store.close()
        logger.info("TaskList API shutdown complete")

    return lifespan


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(
            exclude_none=True
        ),
    )


async def tasklist_error_handler(request: Request, exc: TaskListError) -> JSONResponse:
    """Render any core.errors exception with its own status, code and message.

    Only the class-level message reaches the client. StorageError has already
    logged the driver exception in core.db; it is logged again here with the
    route so the two lines can be correlated.
    """
    if isinstance(exc, StorageError):
        logger.error("Storage error on %s %s", request.method, request.url.path)
    return _error_response(exc.status_code, exc.code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with structured error when the body, path or query fails validation."""
    fields = sorted({".".join(str(p) for p in err.get("loc", ())[1:]) or "body" for err in exc.errors()})
    return _error_response(400, "validation_error", "Request validation failed.", ", ".join(fields))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return a structured error for FastAPI/Starlette HTTP exceptions (404 route, 405 method)."""
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the TaskList ASGI application.

    Args:
        settings: Explicit configuration. Defaults to get_settings(), which
                  reads the environment and raises if SECRET_KEY or
                  DATABASE_URL is missing.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="TaskList API",
        description="Multi-user to-do list with bearer-token authentication.",
        version=VERSION,
        lifespan=_make_lifespan(settings),
    )

    tasks_path = f"{settings.api_prefix}/tasks"

    # Registered before CORSMiddleware so it sits inside it: preflight
    # requests are answered by CORS, and 401s still carry CORS headers.
    # Exceptions raised here would bypass the exception handlers, hence the
    # explicit response.
    @app.middleware("http")
    async def require_bearer(request: Request, call_next):
        path = request.url.path
        if path == tasks_path or path.startswith(tasks_path + "/"):
            try:
                request.app.state.guard.authorize(request.headers.get("Authorization"))
            except AuthenticationError as exc:
                return _error_response(exc.status_code, exc.code, exc.message)
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            response.status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
        return response

    app.add_exception_handler(TaskListError, tasklist_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(auth_router, prefix=settings.api_prefix, tags=["Auth"])
    app.include_router(tasks_router, prefix=settings.api_prefix, tags=["Tasks"])

    @app.get(f"{settings.api_prefix}/health", tags=["Health"])
    def health(request: Request) -> HealthResponse:
        """Return liveness plus a database reachability check. No auth required."""
        try:
            request.app.state.user_store.ping()
            database = "ok"
        except StorageError:
            database = "error"
        return HealthResponse(version=VERSION, components={"app": "ok", "database": database})

    return app
