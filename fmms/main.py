"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from secure import Secure

from fmms import __version__
from fmms.api import api_router
from fmms.core.config import get_settings
from fmms.db.session import create_schema, dispose_engine
from fmms.security.logging_filters import SensitiveFilter
from fmms.services.bootstrap_service import ensure_default_user

logger = logging.getLogger(__name__)

settings = get_settings()

_ALLOWED_ORIGINS = [origin for origin in settings.cors_allowlist if origin]
if not _ALLOWED_ORIGINS:
    _ALLOWED_ORIGINS = ["http://localhost:5173"]

logging.getLogger("fmms").setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.auto_create_schema:
        try:
            await create_schema()
        except Exception:  # pragma: no cover - best effort schema setup
            logger.exception("Failed to create database schema")
    try:
        await ensure_default_user()
    except Exception:  # pragma: no cover - best effort bootstrap
        logger.exception("Failed to ensure default caregiver account")
    try:
        yield
    finally:
        try:
            await dispose_engine()
        except Exception:  # pragma: no cover - engine shutdown
            logger.exception("Failed to dispose database engine")


app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")

_secure_headers = Secure()


@app.middleware("http")
async def _apply_security_headers(request, call_next):
    response = await call_next(request)
    _secure_headers.set_headers(response)
    return response


for _logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error", ""):
    _logger = logging.getLogger(_logger_name)
    if not any(isinstance(flt, SensitiveFilter) for flt in _logger.filters):
        _logger.addFilter(SensitiveFilter())

app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Return a simple welcome message."""
    return {"message": settings.app_name}
