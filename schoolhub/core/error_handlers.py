from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from .config import settings
from .exceptions import (
    SchoolHubException, UnhandledError, RecordNotFoundError,
    UniqueConstraintError, ForeignKeyViolationError
)

logger = logging.getLogger(__name__)


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _redacted(message: str) -> str:
    return "Internal server error" if settings.is_production else message


async def schoolhub_exception_handler(request: Request, exc: SchoolHubException):
    """Handle domain exceptions"""
    if isinstance(exc, UnhandledError):
        logger.error(f"{exc.operation} failed - Path: {request.url.path}")
        return _message(exc.status_code, _redacted(exc.message))
    if exc.status_code >= 500:
        logger.error(f"Server error: {exc.message} - Path: {request.url.path}")
        return _message(exc.status_code, _redacted(exc.message))
    return _message(exc.status_code, exc.message)


async def data_access_exception_handler(request: Request, exc: Exception):
    """Fallback mapping for persistence errors no service translated"""
    if isinstance(exc, RecordNotFoundError):
        return _message(404, str(exc))
    if isinstance(exc, UniqueConstraintError):
        return _message(400, "Record already exists")
    if isinstance(exc, ForeignKeyViolationError):
        return _message(400, "Invalid reference ID")
    return await general_exception_handler(request, exc)


async def http_exception_handler(request: Request, exc: HTTPException):
    return _message(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return _message(400, message)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.exception(f"Unexpected error: {exc} - Path: {request.url.path}")
    return _message(500, _redacted(str(exc)))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(SchoolHubException, schoolhub_exception_handler)
    app.add_exception_handler(RecordNotFoundError, data_access_exception_handler)
    app.add_exception_handler(UniqueConstraintError, data_access_exception_handler)
    app.add_exception_handler(ForeignKeyViolationError, data_access_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)
