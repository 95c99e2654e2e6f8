from logging import Logger
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from country_api.core.exception import BaseAppError, NotFoundError, SourceUnavailableError, ValidationError
from country_api.core.logging import get_logger

logger: Logger = get_logger(__name__)


def init(app: FastAPI):
    def _result(
        status_code: int,
        error: str,
        _type: str = "Error",
        headers: dict | None = None,
        **extra: Any,
    ):
        logger.debug({status_code, error, _type})
        content = {"error": error, **extra}
        return JSONResponse(
            status_code=status_code,
            content=content,
            headers=headers or {"X-Error": _type},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
        logger.debug(f"HTTPException handler caught: {type(exc).__name__} - {exc.detail}")
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _result(status.HTTP_404_NOT_FOUND, "Endpoint not found", "NotFound")
        return _result(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError):
        details = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error.get("loc", [])[1:])
            details.append({"field": field, "message": error.get("msg", "Validation error")})
        return _result(status.HTTP_400_BAD_REQUEST, "Validation failed", "ValidationError", details=details)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(_request: Request, exc: ValidationError):
        return _result(status.HTTP_400_BAD_REQUEST, exc.message, "ValidationError", details=exc.details)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError):
        return _result(status.HTTP_404_NOT_FOUND, exc.message, "NotFoundError")

    @app.exception_handler(SourceUnavailableError)
    async def source_unavailable_handler(_request: Request, exc: SourceUnavailableError):
        logger.warning(f"{exc.message}: {exc.reason}")
        return _result(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "External data source unavailable",
            "SourceUnavailableError",
            details=exc.message,
        )

    @app.exception_handler(BaseAppError)
    async def app_exception_handler(_request: Request, exc: BaseAppError):
        logger.debug(f"BaseAppError handler caught: {type(exc).__name__} - {exc.message}")
        return _result(status.HTTP_400_BAD_REQUEST, exc.message, exc.__class__.__name__)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {exc!s}",
            exc_info=exc,
            extra={
                "request_path": str(request.url.path),
                "request_method": request.method,
                "exception_type": type(exc).__name__,
            },
        )

        return _result(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            "InternalServerError",
            message=str(exc),
        )
