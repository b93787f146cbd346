"""Exception handlers mapping catalog errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from parts_catalog.services.exceptions import (
    CatalogError,
    DuplicateProductError,
    NotFoundError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Handle catalog exceptions."""
    if isinstance(exc, NotFoundError):
        return JSONResponse(
            {
                "message": exc.message,
                "code": exc.code,
                "productCode": exc.product_code,
            },
            status_code=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, ValidationError):
        return JSONResponse(
            {
                "message": exc.message,
                "code": exc.code,
                "field": exc.field,
            },
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, DuplicateProductError):
        return JSONResponse(
            {
                "message": exc.message,
                "code": exc.code,
                "productCode": exc.product_code,
            },
            status_code=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, StoreError):
        logger.error(
            f"Store failure on {request.method} {request.url.path}: {exc.detail}",
            exc_info=exc,
        )
        return JSONResponse(
            {
                "message": exc.message,
                "code": exc.code,
                "error": exc.detail,
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(
        {
            "message": exc.message,
            "code": exc.code,
        },
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as client errors with a message field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(location) or None
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        {
            "message": message,
            "code": "VALIDATION_ERROR",
            "field": field,
        },
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
