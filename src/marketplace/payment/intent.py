"""Payment intent creation: command and handler.

Creating an intent twice for the same pending order returns the existing
intent instead of opening a second one. The processor call is made before
anything is persisted, so a processor failure leaves no trace.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.exceptions import InvalidStateError
from marketplace.gateway import get_gateway
from marketplace.order.lookup import order_for_customer
from marketplace.order.status import OrderStatus
from marketplace.payment.payment import Payment, PaymentStatus
from marketplace.payment.queries import payment_for_order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Payment")
class CreatePaymentIntent:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


def idempotency_key(order_id, attempt) -> str:
    return f"{order_id}:{attempt}"


@marketplace.command_handler(part_of=Payment)
class CreatePaymentIntentHandler:
    @handle(CreatePaymentIntent)
    def create_payment_intent(self, command):
        order = order_for_customer(command.order_id, command.customer_id)
        if order.current_status != OrderStatus.PENDING:
            raise InvalidStateError({"status": [f"Order is {order.status}, payment is not allowed"]})

        gateway = get_gateway()
        repo = current_domain.repository_for(Payment)
        existing = payment_for_order(order.id)
        payment = repo.get(existing.id) if existing else None

        if payment is not None and PaymentStatus(payment.status) == PaymentStatus.PENDING:
            intent = gateway.retrieve_intent(payment.intent_id)
            logger.info("Reusing pending payment intent", order_id=str(order.id), intent_id=intent.intent_id)
            return {"client_secret": intent.client_secret, "intent_id": intent.intent_id}

        if payment is not None and PaymentStatus(payment.status) != PaymentStatus.FAILED:
            raise InvalidStateError({"status": [f"Payment is already {payment.status}"]})

        attempt = payment.next_attempt if payment is not None else 1
        intent = gateway.create_intent(
            amount_cents=order.total_amount_cents,
            currency=order.currency,
            metadata={"order_id": str(order.id), "customer_id": str(order.customer_id)},
            idempotency_key=idempotency_key(order.id, attempt),
        )

        if payment is None:
            payment = Payment.open(
                order_id=str(order.id),
                customer_id=str(order.customer_id),
                amount_cents=order.total_amount_cents,
                currency=order.currency,
                intent_id=intent.intent_id,
            )
        else:
            payment.rearm(intent.intent_id, order.total_amount_cents)
        repo.add(payment)

        logger.info(
            "Payment intent created",
            order_id=str(order.id),
            intent_id=intent.intent_id,
            amount_cents=order.total_amount_cents,
            attempt=attempt,
        )
        return {"client_secret": intent.client_secret, "intent_id": intent.intent_id}
