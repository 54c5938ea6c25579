import logging
from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from quickbite.core.errors import DomainError
from quickbite.schemas.response import ErrorDetail, ErrorResponse

log = logging.getLogger(__name__)


def _error_body(code: str, message, **extra) -> dict:
    return ErrorResponse(error=ErrorDetail(code=code, message=message, **extra)).to_body()


# ----------- Exception Handlers (called by FastAPI) -----------

def domain_exception_handler(request: Request, exc: DomainError):
    """Maps service-layer errors onto HTTP by their kind (400/401/403/404/409/503)."""
    log.info("%s %s -> %s (%s): %s", request.method, request.url.path, exc.status_code, exc.code, exc.message)
    body = _error_body(exc.code, exc.message, kind=exc.kind)
    return JSONResponse(status_code=exc.status_code, content=body)


def http_exception_handler(request: Request, exc: HTTPException):
    """Handles exceptions raised by HTTPException (e.g., 401 from the auth dependency)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("http_error", exc.detail),
        headers=getattr(exc, "headers", None),
    )


def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles Pydantic validation errors (422 Unprocessable Entity)."""
    body = _error_body("validation_error", "Invalid input data", details=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=422, content=body)


def generic_exception_handler(request: Request, exc: Exception):
    """Handles all unhandled exceptions (500 Internal Server Error)."""
    log.exception("Unhandled exception on path: %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body("server_error", "Internal Server Error"))


# ----------- Registration Function -----------

def setup_exception_handlers(app: FastAPI):
    """Registers all custom exception handlers with the FastAPI application."""
    app.add_exception_handler(DomainError, domain_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app
