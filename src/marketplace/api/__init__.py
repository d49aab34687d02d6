from marketplace.api.routes import admin_router, notification_router, order_router, payment_router

__all__ = ["admin_router", "notification_router", "order_router", "payment_router"]
