"""Payment lookups and the customer-facing payment status view."""

from protean.utils.globals import current_domain

from marketplace.money import format_amount
from marketplace.order.lookup import order_for_customer
from marketplace.payment.payment import Payment


def _first(**filters):
    results = current_domain.repository_for(Payment)._dao.query.filter(**filters).all().items
    return results[0] if results else None


def payment_for_order(order_id) -> Payment | None:
    return _first(order_id=str(order_id))


def payment_for_intent(intent_id) -> Payment | None:
    return _first(intent_id=str(intent_id))


def get_payment_status(order_id, customer_id) -> dict:
    order = order_for_customer(order_id, customer_id)
    payment = payment_for_order(order_id)
    return {
        "order_id": str(order.id),
        "order_status": order.status,
        "payment": (
            {
                "status": payment.status,
                "amount": format_amount(payment.amount_cents),
                "failure_reason": payment.failure_reason,
                "paid_at": payment.paid_at.isoformat() if payment.paid_at else None,
            }
            if payment
            else None
        ),
    }
