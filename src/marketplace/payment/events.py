"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Payment")
class PaymentIntentCreated:
    """A payment intent was opened (or re-opened after a failure) for an order."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    intent_id = String(required=True, max_length=255)
    amount_cents = Integer(required=True)
    attempt = Integer(required=True)


@marketplace.event(part_of="Payment")
class PaymentSucceeded:
    """The processor captured the payment."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    amount_cents = Integer(required=True)
    currency = String(max_length=3)
    charge_id = String(max_length=255)
    paid_at = DateTime(required=True)


@marketplace.event(part_of="Payment")
class PaymentFailed:
    """The processor declined or could not complete the payment."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason = String(max_length=500)
    failed_at = DateTime(required=True)
