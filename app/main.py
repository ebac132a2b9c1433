# app/main.py
"""
FastAPI application entry point.
Builds the shared review components once, registers error handlers and routers.
"""

from datetime import datetime
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from app.routers import events, monitors, health
from app.config import Settings, settings
from app.errors import ErrorKind, ReviewError
from app.schemas.common import ErrorOut
from app.services.frame_extractor import FrameDecoder
from app.services.storage_locator import build_locator
from app.utils.logger import get_logger
import logging
import time

logger = get_logger(__name__)

ERROR_STATUS = {
    ErrorKind.VALIDATION: (status.HTTP_400_BAD_REQUEST, "Validation of request failed"),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Requested resource was not found"),
    ErrorKind.CONFIGURATION: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage is misconfigured"),
    ErrorKind.EXTRACTION: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Could not extract frame"),
}

# Client-side kinds stay at debug; server-side failures must show up in the logs
ERROR_LOG_LEVEL = {
    ErrorKind.CONFIGURATION: logging.ERROR,
    ErrorKind.EXTRACTION: logging.WARNING,
}

ERROR_REASONS = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "INTERNAL_SERVER_ERROR",
}


def error_response(status_code: int, message: str, errors: list | None = None) -> JSONResponse:
    body = ErrorOut(
        status=ERROR_REASONS.get(status_code, "ERROR"),
        code=status_code,
        timestamp=datetime.utcnow(),
        message=message,
        errors=errors,
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def configure_review(app: FastAPI, config: Settings):
    """Attach the locator, decoder and time zone built from one settings snapshot."""
    app.state.locator = build_locator(
        config.STORAGE_STRATEGY, config.DEFAULT_STORAGE_PATH, config.MEDIA_ROOTS, config.PATH_LAYOUT
    )
    app.state.decoder = FrameDecoder(
        max_workers=config.MAX_CONCURRENT_DECODES,
        timeout=config.DECODE_TIMEOUT_SECONDS,
        jpeg_quality=config.JPEG_QUALITY,
    )
    app.state.event_timezone = config.EVENT_TIMEZONE
    if config.STORAGE_STRATEGY == "named":
        app.state.storage_roots = dict(config.MEDIA_ROOTS)
    else:
        app.state.storage_roots = {"default": config.DEFAULT_STORAGE_PATH}


app = FastAPI(
    title="ZoneMinder Review API",
    description="Time-based review of ZoneMinder recordings: event search, export and frame extraction.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the review frontend is served from another origin) ────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

configure_review(app, settings)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error Handlers ───────────────────────────────────────────────────────────
@app.exception_handler(ReviewError)
async def review_error_handler(request: Request, exc: ReviewError):
    status_code, message = ERROR_STATUS[exc.kind]
    logger.log(ERROR_LOG_LEVEL.get(exc.kind, logging.DEBUG), f"{exc.kind.value} on {request.url.path}: {exc}")
    return error_response(status_code, message, [exc.detail()])


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(events.router,   prefix="/api/v1", tags=["🎞️ Events"])
app.include_router(monitors.router, prefix="/api/v1", tags=["📷 Monitors"])
app.include_router(health.router,   prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Review backend starting up...")
    logger.info(f"🗂️  Storage roots: {app.state.storage_roots}")
    logger.info(f"🕒 Event times interpreted as {app.state.event_timezone}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Review backend shutting down...")
    app.state.decoder.shutdown()
