"""Map storefront rejections to HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.errors import (
    EmptyOrder,
    Forbidden,
    InsufficientStock,
    NoDefaultAddress,
    NotAuthenticated,
    PersistenceFailure,
    ProductNotFound,
    StorefrontError,
    VariantNotFound,
)

logger = structlog.get_logger(__name__)

STATUS_BY_ERROR = {
    NotAuthenticated: 401,
    Forbidden: 403,
    ProductNotFound: 404,
    VariantNotFound: 404,
    InsufficientStock: 409,
    NoDefaultAddress: 422,
    EmptyOrder: 422,
    PersistenceFailure: 500,
}


def status_for(exc: StorefrontError) -> int:
    for error_type, status in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status
    return 400


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.code, stage=getattr(exc, "stage", None))
    return JSONResponse(status_code=status, content={"error": exc.code, "notice": exc.notice})


def register_storefront_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
