"""Configurable fake payment gateway for development and testing.

Simulates a payment processor without any external calls. Intents are kept
in memory and keyed by idempotency key, so repeating a create with the same
key returns the same intent as a real processor would. Webhooks are accepted
when signed with ``test-signature``.
"""

import json
from uuid import uuid4

from marketplace.exceptions import PaymentGatewayError, WebhookSignatureError
from marketplace.gateway.port import (
    IntentResult,
    PaymentGateway,
    WebhookEvent,
    webhook_event_from_payload,
)

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.available: bool = True
        self.calls: list[dict] = []
        self.intents: dict[str, IntentResult] = {}
        self._by_idempotency_key: dict[str, str] = {}

    def configure(self, available: bool) -> None:
        """Simulate the processor being reachable or timing out."""
        self.available = available

    def _check_available(self) -> None:
        if not self.available:
            raise PaymentGatewayError(
                {"gateway": ["Payment processor timed out"]},
                retryable=True,
            )

    def create_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        idempotency_key: str,
    ) -> IntentResult:
        self.calls.append(
            {
                "method": "create_intent",
                "amount_cents": amount_cents,
                "currency": currency,
                "metadata": metadata,
                "idempotency_key": idempotency_key,
            }
        )
        self._check_available()

        if idempotency_key in self._by_idempotency_key:
            return self.intents[self._by_idempotency_key[idempotency_key]]

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        intent = IntentResult(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            amount_cents=amount_cents,
            currency=currency,
            status="requires_payment_method",
        )
        self.intents[intent_id] = intent
        self._by_idempotency_key[idempotency_key] = intent_id
        return intent

    def retrieve_intent(self, intent_id: str) -> IntentResult:
        self.calls.append({"method": "retrieve_intent", "intent_id": intent_id})
        self._check_available()

        if intent_id not in self.intents:
            raise PaymentGatewayError({"intent_id": [f"No such payment intent: {intent_id}"]})
        return self.intents[intent_id]

    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        if signature != TEST_SIGNATURE:
            raise WebhookSignatureError({"signature": ["Invalid webhook signature"]})
        try:
            decoded = json.loads(payload)
        except ValueError as exc:
            raise WebhookSignatureError({"payload": ["Malformed webhook payload"]}) from exc
        if not isinstance(decoded, dict):
            raise WebhookSignatureError({"payload": ["Malformed webhook payload"]})
        return webhook_event_from_payload(decoded)
