"""FastAPI application factory for the marketplace API."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import admin_router, notification_router, order_router, payment_router
from marketplace.domain import marketplace
from marketplace.utils.logging import add_context, clear_context


def create_app() -> FastAPI:
    app = FastAPI(
        title="Marketplace API",
        description="Multi-vendor orders, payments and fulfillment",
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
        """Push the marketplace domain context and request log context."""
        add_context(method=request.method, path=request.url.path)
        try:
            with marketplace.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    app.include_router(order_router)
    app.include_router(payment_router)
    app.include_router(admin_router)
    app.include_router(notification_router)
    register_error_handlers(app)

    @app.get("/health")
    async def health():
        return {"status": "ok", "domain": marketplace.name}

    return app
