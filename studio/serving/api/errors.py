"""
API Error Handlers

Every error response carries an ``error`` key. Handlers are registered on
the application by ``create_api_app``.
"""

from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from studio.config import Settings
from studio.domain.exceptions import StudioValidationError

logger = structlog.get_logger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Install the JSON error handlers on ``app``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # No endpoint in scope means no route matched
        if exc.status_code == 404 and request.scope.get("endpoint") is None:
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "error": "Route not found",
                    "path": request.url.path,
                    "method": request.method,
                    "timestamp": _timestamp(),
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected invalid request", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StudioValidationError)
    async def studio_validation_handler(request: Request, exc: StudioValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        details = str(getattr(exc, "orig", None) or exc)
        logger.error(
            "Database error",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            details=details,
        )
        return JSONResponse(status_code=500, content={"error": "Database error", "details": details})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", path=request.url.path, method=request.method)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "message": "Something went wrong" if settings.is_production else str(exc),
                "timestamp": _timestamp(),
            },
        )
