"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from devevents.config import settings
from devevents.database import connection_cache
from devevents.errors import DomainError, ErrorCode, InfrastructureError

# Import routers
from devevents.routers import bookings, events

# Import all models so Base.metadata knows about them
from devevents.models.event import Event  # noqa: F401
from devevents.models.booking import Booking  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Dev Events",
    description="Developer events catalog with bookings and a public read API",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["Bookings"])


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Render domain errors in the fixed {success, error: {code, message}} shape."""
    if isinstance(exc, InfrastructureError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid value for '{location}'." if location else "Invalid request body."
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": {"code": ErrorCode.invalid_format.value, "message": message}},
    )


def _internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": ErrorCode.internal_server_error.value,
                "message": "An unexpected error occurred.",
            },
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("%s %s database error", request.method, request.url.path, exc_info=exc)
    return _internal_error()


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Last resort: never leak a stack trace or a framework-shaped body."""
    logger.exception("%s %s unhandled error", request.method, request.url.path, exc_info=exc)
    return _internal_error()


@app.on_event("startup")
def on_startup():
    """Refuse to start without a database URL."""
    if not connection_cache.url:
        logger.critical("DATABASE_URL is not set; refusing to start")
        connection_cache.get_connection()


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
