"""Map marketplace exceptions onto HTTP responses.

Protean's own handlers are installed first; the marketplace taxonomy is then
registered on top so the most specific class decides the status code.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from marketplace.exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    PaymentGatewayError,
    WebhookSignatureError,
)

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    ValidationError: 400,
    ObjectNotFoundError: 404,
    NotFoundError: 404,
    InvalidStateError: 409,
    InvalidTransitionError: 409,
    WebhookSignatureError: 401,
}


def _messages(exc):
    return getattr(exc, "messages", None) or {"error": [str(exc)]}


def _handler_for(status_code):
    async def handler(_: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"error": _messages(exc)})

    return handler


async def _gateway_error_handler(_: Request, exc: PaymentGatewayError):
    status_code = 503 if exc.retryable else 502
    logger.warning("Payment gateway error returned to client", retryable=exc.retryable, status_code=status_code)
    return JSONResponse(status_code=status_code, content={"error": exc.messages})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _handler_for(status_code))
    app.add_exception_handler(PaymentGatewayError, _gateway_error_handler)
