"""Stripe payment gateway adapter.

Uses the stripe-python SDK to create and retrieve PaymentIntents and to
verify webhook signatures with the endpoint's signing secret. Every call is
bounded by ``timeout`` seconds; timeouts and connection failures surface as
retryable ``PaymentGatewayError``.
"""

import json

import stripe
import structlog

from marketplace.exceptions import PaymentGatewayError, WebhookSignatureError
from marketplace.gateway.port import (
    IntentResult,
    PaymentGateway,
    WebhookEvent,
    webhook_event_from_payload,
)

logger = structlog.get_logger(__name__)

_RETRYABLE = (stripe.APIConnectionError, stripe.RateLimitError)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(
        self,
        api_key: str,
        webhook_secret: str,
        timeout: float = 10.0,
        max_network_retries: int = 2,
    ) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)
        stripe.max_network_retries = max_network_retries

    @staticmethod
    def _to_result(intent) -> IntentResult:
        return IntentResult(
            intent_id=intent["id"],
            client_secret=intent["client_secret"],
            amount_cents=intent["amount"],
            currency=intent["currency"],
            status=intent["status"],
        )

    def _call(self, operation, **params):
        try:
            return operation(api_key=self.api_key, **params)
        except _RETRYABLE as exc:
            logger.warning("Stripe unreachable", error=str(exc))
            raise PaymentGatewayError(
                {"gateway": ["Payment processor is unavailable, please retry"]},
                retryable=True,
            ) from exc
        except stripe.StripeError as exc:
            logger.error("Stripe request failed", error=str(exc), code=getattr(exc, "code", None))
            raise PaymentGatewayError({"gateway": [exc.user_message or "Payment processor error"]}) from exc

    def create_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        idempotency_key: str,
    ) -> IntentResult:
        intent = self._call(
            stripe.PaymentIntent.create,
            amount=amount_cents,
            currency=currency,
            metadata=metadata,
            automatic_payment_methods={"enabled": True},
            idempotency_key=idempotency_key,
        )
        return self._to_result(intent)

    def retrieve_intent(self, intent_id: str) -> IntentResult:
        return self._to_result(self._call(stripe.PaymentIntent.retrieve, id=intent_id))

    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise WebhookSignatureError({"signature": ["Invalid webhook signature"]}) from exc
        except ValueError as exc:
            raise WebhookSignatureError({"payload": ["Malformed webhook payload"]}) from exc
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        return webhook_event_from_payload(json.loads(payload))
