"""
Folio API - portfolio builder backend.

FastAPI application serving the dashboard data endpoints and the public
portfolio read path.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from uuid import UUID

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from folio.auth.session_events import SessionEvent, SessionEvents
from folio.config import settings, validate_security_settings
from folio.database import AsyncSessionLocal, dispose_engine, init_db
from folio.middleware.rate_limit import limiter
from folio.routers.auth import router as auth_router
from folio.routers.blogs import router as blogs_router
from folio.routers.dashboard import router as dashboard_router
from folio.routers.education import router as education_router
from folio.routers.experience import router as experience_router
from folio.routers.portfolios import router as portfolios_router
from folio.routers.profile import router as profile_router
from folio.routers.projects import router as projects_router
from folio.services.cache import QueryCache
from folio.services.record_store import SqlRecordStore
from folio.services.storage import ObjectStorage
from folio.services.username import Debouncer

# Import models to register them with Base.metadata
from folio import models  # noqa: F401

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Application lifespan handler for startup/shutdown."""
    validate_security_settings()
    await init_db()
    Path(settings.storage_root).mkdir(parents=True, exist_ok=True)
    logger.info("Folio API started (environment=%s)", settings.environment)
    yield
    await dispose_engine()


app = FastAPI(
    title="Folio API",
    description="Portfolio builder: dashboard data, mutations and public portfolios",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# --- Shared services ---

app.state.cache = QueryCache(default_ttl=settings.dashboard_cache_ttl_seconds)
app.state.record_store = SqlRecordStore(AsyncSessionLocal)
app.state.storage = ObjectStorage(
    settings.storage_root,
    settings.storage_public_path,
    settings.max_upload_bytes,
)
app.state.username_debouncer = Debouncer(settings.username_check_debounce_seconds)
app.state.session_events = SessionEvents()


def clear_cache_on_sign_out(event: SessionEvent, user_id: UUID | None) -> None:
    """Nothing cached for an earlier session may be served after sign-out."""
    if event is SessionEvent.SIGNED_OUT:
        app.state.cache.clear()


app.state.session_events.subscribe(clear_cache_on_sign_out)

# Add rate limiter state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(projects_router)
app.include_router(education_router)
app.include_router(experience_router)
app.include_router(blogs_router)
app.include_router(profile_router)
app.include_router(portfolios_router)

# Uploaded avatars and project images
app.mount(
    settings.storage_public_path,
    StaticFiles(directory=settings.storage_root, check_dir=False),
    name="storage",
)


# --- Middleware ---


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add a unique request ID to each request."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# --- Exception Handlers ---


def _sanitize_error_detail(error: dict[str, Any]) -> dict[str, Any]:
    """Make a Pydantic error detail JSON-serializable."""
    sanitized = {}
    for key, value in error.items():
        if key == "ctx":
            sanitized[key] = {k: str(v) for k, v in value.items()} if isinstance(value, dict) else str(value)
        elif key == "loc":
            sanitized[key] = [str(loc) for loc in value]
        elif key == "input":
            continue
        else:
            sanitized[key] = value
    return sanitized


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation errors in the standard error envelope."""
    request_id = getattr(request.state, "request_id", None)

    errors = [_sanitize_error_detail(e) for e in exc.errors()]
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", []))
        msg = first_error.get("msg", "Validation error")
        message = f"{field}: {msg}" if field else msg
    else:
        message = "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": message,
                "request_id": request_id,
                "details": errors,
            }
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log uncaught exceptions and answer with the standard error envelope."""
    request_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled error on %s %s (request %s)", request.method, request.url.path, request_id)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "request_id": request_id,
            }
        },
    )


# --- Health Check ---


@app.get("/api/v1/health", tags=["System"])
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK if the API is running.
    """
    return {"status": "healthy"}
