"""Payment aggregate: one processor payment intent per order.

State Machine:
    PENDING → PAID
    PENDING → FAILED → PENDING (new intent)
    FAILED → PAID (late success for the earlier intent)
    PAID → REFUNDED (reserved; refunds are handled outside this service)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.exceptions import InvalidStateError
from marketplace.payment.events import PaymentFailed, PaymentIntentCreated, PaymentSucceeded


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


@marketplace.aggregate
class Payment:
    order_id = Identifier(required=True, unique=True)
    customer_id = Identifier(required=True)
    amount_cents = Integer(required=True, min_value=0)
    currency = String(max_length=3, default="usd")
    intent_id = String(required=True, max_length=255, unique=True)
    charge_id = String(max_length=255)
    status = String(max_length=20, choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    failure_reason = String(max_length=500)
    intent_attempts = Integer(default=1, min_value=1)
    paid_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def paid_payment_must_record_paid_at(self):
        if self.status == PaymentStatus.PAID.value and self.paid_at is None:
            raise ValidationError({"paid_at": ["A paid payment must record when it was paid"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, order_id, customer_id, amount_cents, currency, intent_id):
        now = datetime.now(UTC)
        payment = cls(
            order_id=order_id,
            customer_id=customer_id,
            amount_cents=amount_cents,
            currency=currency,
            intent_id=intent_id,
            status=PaymentStatus.PENDING.value,
            intent_attempts=1,
            created_at=now,
            updated_at=now,
        )
        payment._raise_intent_created()
        return payment

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID.value

    @property
    def next_attempt(self) -> int:
        return (self.intent_attempts or 0) + 1

    def _raise_intent_created(self):
        self.raise_(
            PaymentIntentCreated(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                customer_id=str(self.customer_id),
                intent_id=self.intent_id,
                amount_cents=self.amount_cents,
                attempt=self.intent_attempts,
            )
        )

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def rearm(self, intent_id, amount_cents):
        """Attach a fresh intent to a FAILED payment and make it PENDING again."""
        if PaymentStatus(self.status) != PaymentStatus.FAILED:
            raise InvalidStateError({"status": [f"Cannot open a new intent for a {self.status} payment"]})

        self.intent_id = intent_id
        self.amount_cents = amount_cents
        self.intent_attempts = self.next_attempt
        self.failure_reason = None
        self.status = PaymentStatus.PENDING.value
        self.updated_at = datetime.now(UTC)
        self._raise_intent_created()

    def mark_paid(self, charge_id=None) -> bool:
        """Record capture. Returns False when the payment was already PAID."""
        current = PaymentStatus(self.status)
        if current == PaymentStatus.PAID:
            return False
        if current == PaymentStatus.REFUNDED:
            raise InvalidStateError({"status": ["Cannot mark a refunded payment as paid"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = PaymentStatus.PAID.value
            self.paid_at = now
            self.charge_id = charge_id
            self.failure_reason = None
            self.updated_at = now

        self.raise_(
            PaymentSucceeded(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                customer_id=str(self.customer_id),
                amount_cents=self.amount_cents,
                currency=self.currency,
                charge_id=charge_id,
                paid_at=now,
            )
        )
        return True

    def mark_failed(self, reason=None) -> bool:
        """Record a decline. Returns False when there was nothing to change."""
        if PaymentStatus(self.status) != PaymentStatus.PENDING:
            return False

        now = datetime.now(UTC)
        self.status = PaymentStatus.FAILED.value
        self.failure_reason = reason or "Payment failed"
        self.updated_at = now

        self.raise_(
            PaymentFailed(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                customer_id=str(self.customer_id),
                reason=self.failure_reason,
                failed_at=now,
            )
        )
        return True
