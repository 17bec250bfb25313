import asyncio
import contextlib
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kitchen_iam.config import validate_config
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message, **exc.details}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(
        status_code=exc.status_code, content={"error": error_dict}, headers=exc.headers
    )


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    response.headers.setdefault(
        "Permissions-Policy", "camera=(), microphone=(), geolocation=()"
    )
    if request.url.scheme == "https":
        response.headers.setdefault(
            "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
        )
    return response


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    response.headers["X-Request-ID"] = request_id
    logger.info(
        f"[{request_id}] {request.method} {request.url.path} "
        f"-> {response.status_code} ({duration_ms:.1f}ms)"
    )
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the cleanup loop when enabled; cancel it on shutdown."""
    config = app.state.config
    cleanup_task = None
    if config.ENABLE_CLEANUP_JOB:
        from kitchen_iam.adapter.services.cleanup_job import run_cleanup_loop
        from kitchen_iam.depends import AsyncSessionLocal

        cleanup_task = asyncio.create_task(
            run_cleanup_loop(AsyncSessionLocal, config.CLEANUP_INTERVAL_SECONDS)
        )

    yield

    if cleanup_task is not None:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task


def create_app(ApplicationConfig) -> FastAPI:
    validate_config(ApplicationConfig)

    app = FastAPI(title="Kitchen IAM", version="0.1.0", lifespan=lifespan)
    app.state.config = ApplicationConfig

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(add_security_headers)
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.middleware("http")(log_requests)

    from kitchen_iam.api.routes import admin, auth, health_check, sessions, users

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(users.router, tags=["User"])
    app.include_router(sessions.router, tags=["Sessions"])
    app.include_router(admin.router, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
