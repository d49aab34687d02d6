"""Payment gateway port (abstract interface).

Defines the contract every payment processor adapter implements, so the
payment intent bridge never talks to a vendor SDK directly. Adapters raise
``PaymentGatewayError`` for processor failures and ``WebhookSignatureError``
for webhook payloads that fail verification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


@dataclass(frozen=True)
class IntentResult:
    """A payment intent as known to the processor."""

    intent_id: str
    client_secret: str
    amount_cents: int
    currency: str
    status: str | None = None


@dataclass(frozen=True)
class WebhookEvent:
    """A verified webhook notification, reduced to what the bridge needs."""

    event_id: str | None
    event_type: str
    intent_id: str | None = None
    charge_id: str | None = None
    failure_reason: str | None = None


def webhook_event_from_payload(payload: dict) -> WebhookEvent:
    """Normalise a processor event payload into a ``WebhookEvent``.

    Expects the ``{"id", "type", "data": {"object": {...}}}`` envelope.
    """
    data = (payload.get("data") or {}).get("object") or {}
    last_error = data.get("last_payment_error") or {}
    return WebhookEvent(
        event_id=payload.get("id"),
        event_type=payload.get("type", ""),
        intent_id=data.get("id"),
        charge_id=data.get("latest_charge"),
        failure_reason=last_error.get("message"),
    )


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        idempotency_key: str,
    ) -> IntentResult:
        """Create a payment intent the client can confirm."""
        ...

    @abstractmethod
    def retrieve_intent(self, intent_id: str) -> IntentResult:
        """Fetch an existing payment intent."""
        ...

    @abstractmethod
    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        """Verify a webhook signature and decode its event."""
        ...
