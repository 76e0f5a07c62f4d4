"""HTTP translation of order-core exceptions.

Protean's own handlers cover ``ValidationError`` and friends; the handlers here
add the order-specific context (allowed transitions, stock figures) and map the
non-validation families.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import AuthorizationError, IntegrationError, StateTransitionError, StockError

logger = structlog.get_logger(__name__)


async def _state_transition(request: Request, exc: StateTransitionError):
    return JSONResponse(
        status_code=400,
        content={
            "error": exc.messages,
            "current_status": exc.current,
            "requested_status": exc.requested,
            "allowed": exc.allowed,
        },
    )


async def _stock(request: Request, exc: StockError):
    return JSONResponse(
        status_code=400,
        content={
            "error": exc.messages,
            "product_id": exc.product_id,
            "requested": exc.requested,
            "available": exc.available,
        },
    )


async def _not_found(request: Request, exc: ObjectNotFoundError):
    return JSONResponse(status_code=404, content={"error": str(exc)})


async def _forbidden(request: Request, exc: AuthorizationError):
    logger.info("Forbidden order action", path=request.url.path, reason=str(exc))
    return JSONResponse(status_code=403, content={"error": str(exc)})


async def _integration(request: Request, exc: IntegrationError):
    logger.error("Integration failure reached the API", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"error": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(StateTransitionError, _state_transition)
    app.add_exception_handler(StockError, _stock)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(AuthorizationError, _forbidden)
    app.add_exception_handler(IntegrationError, _integration)
