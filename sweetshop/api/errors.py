"""Map service errors, request validation failures and stray exceptions to JSON responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sweetshop.core.errors import InternalError, ServiceError, Unauthenticated, ValidationError
from sweetshop.schemas.errors import ErrorResponse, FieldErrorItem
from sweetshop.services.validation import field_errors_from_pydantic

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    message: str,
    errors: list[FieldErrorItem] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _validation_response(exc: ValidationError) -> JSONResponse:
    return _error_response(
        exc.status_code,
        exc.message,
        errors=[FieldErrorItem(field=e.field, message=e.message) for e in exc.errors],
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return _validation_response(exc)
    if isinstance(exc, Unauthenticated):
        return _error_response(exc.status_code, exc.message, headers={"WWW-Authenticate": "Bearer"})
    if isinstance(exc, InternalError):
        # Detail was logged where the failure happened; the caller gets a generic message.
        return _error_response(exc.status_code, InternalError().message)
    return _error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    raw_errors = exc.errors()
    from_query_only = bool(raw_errors) and all(
        tuple(e.get("loc", ()))[:1] == ("query",) for e in raw_errors
    )
    message = "Invalid search parameters" if from_query_only else "Validation failed"
    return _validation_response(ValidationError(field_errors_from_pydantic(raw_errors), message=message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError().message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
