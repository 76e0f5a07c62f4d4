"""Storefront FastAPI application.

Web server that processes order commands synchronously via HTTP. Every
request runs inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api import (
    coupon_router,
    customer_router,
    delivery_router,
    order_router,
    product_router,
    register_error_handlers,
)
from storefront.container import build_order_service
from storefront.domain import storefront
from storefront.utils.logging import bind_request_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the configuration overlay.
storefront.init()


def create_app(order_service=None) -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        description="Order lifecycle, stock reservation and payment reconciliation",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for each request."""
        bind_request_context(
            request_id=request.headers.get("x-request-id") or uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        with storefront.domain_context():
            response = await call_next(request)
        return response

    with storefront.domain_context():
        app.state.order_service = order_service or build_order_service()

    app.include_router(order_router)
    app.include_router(delivery_router)
    app.include_router(product_router)
    app.include_router(customer_router)
    app.include_router(coupon_router)
    register_error_handlers(app)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": storefront.name})

    return app


app = create_app()
