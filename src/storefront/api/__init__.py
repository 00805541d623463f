"""Storefront API package."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.routes import OutcomeError, cart_router, order_router, product_router, user_router
from storefront.domain import logger
from storefront.shared.errors import StoreUnavailable

__all__ = ["cart_router", "order_router", "product_router", "user_router", "register_error_handlers"]


def register_error_handlers(app: FastAPI) -> None:
    """Render storefront failures as ``{"error": reason, "code": tag}``."""

    @app.exception_handler(OutcomeError)
    async def outcome_error_handler(request: Request, exc: OutcomeError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.outcome.reason, "code": exc.outcome.error},
        )

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error("store_unavailable", path=request.url.path, reason=exc.reason)
        return JSONResponse(status_code=503, content={"error": exc.reason, "code": exc.code})
