"""
API Error Handlers

Translate the storefront error taxonomy into JSON error responses.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from storefront.exceptions import InvalidPayload, StoreUnavailable, StorefrontError

logger = structlog.get_logger(__name__)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if isinstance(exc, StoreUnavailable):
        logger.error("Store error", path=request.url.path, error=exc.detail)
    else:
        logger.info(
            "Request refused",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=exc.detail,
        )

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Invalid request payload", path=request.url.path, errors=len(exc.errors()))
    return await storefront_error_handler(request, InvalidPayload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
