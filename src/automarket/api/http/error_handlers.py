"""Map domain exceptions onto HTTP responses.

Error response format:
    {
        "detail": "Human-readable error message",
        "request_id": "correlation id of the failed request"
    }
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.automarket.core.errors import (
    BusinessRuleError,
    MarketplaceError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
)

_STATUS_BY_TYPE: tuple[tuple[type[MarketplaceError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (BusinessRuleError, status.HTTP_400_BAD_REQUEST),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: MarketplaceError) -> int:
    for exc_type, code in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def error_response(request: Request, status_code: int, detail) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": request_id},
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(
        request: Request, exc: MarketplaceError
    ) -> JSONResponse:
        status_code = status_for(exc)

        if status_code >= 500:
            # Store failures are logged with the cause; clients get a generic message
            logger.opt(exception=exc).error(
                f"{type(exc).__name__} on {request.method} {request.url.path}"
            )
            return error_response(request, status_code, "Internal Server Error")

        logger.warning(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
        )
        return error_response(request, status_code, exc.message)

    @app.exception_handler(ValidationError)
    async def entity_validation_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        logger.warning(f"Entity validation failed on {request.url.path}: {exc.error_count()} errors")
        return error_response(
            request,
            422,
            exc.errors(include_url=False, include_context=False, include_input=False),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(request, 422, jsonable_encoder(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        response = error_response(request, exc.status_code, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response
