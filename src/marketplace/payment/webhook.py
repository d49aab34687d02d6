"""Payment webhook processing: verify, dispatch, and apply processor outcomes.

``handle_payment_outcome`` is the entry point for raw webhook deliveries.
Success and failure are applied through commands so each runs in its own Unit
of Work. The processor redelivers events, so both commands are idempotent.
"""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.exceptions import WebhookSignatureError
from marketplace.gateway import get_gateway
from marketplace.gateway.port import PAYMENT_FAILED, PAYMENT_SUCCEEDED
from marketplace.order.order import Order
from marketplace.payment.payment import Payment
from marketplace.payment.queries import payment_for_intent
from marketplace.vendor.vendor import Vendor

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Payment")
class ConfirmPayment:
    intent_id = String(required=True, max_length=255)
    charge_id = String(max_length=255)


@marketplace.command(part_of="Payment")
class RecordPaymentFailure:
    intent_id = String(required=True, max_length=255)
    reason = String(max_length=500)


def _load_payment(intent_id):
    found = payment_for_intent(intent_id)
    if found is None:
        logger.warning("Webhook for unknown payment intent", intent_id=intent_id)
        return None
    return current_domain.repository_for(Payment).get(found.id)


@marketplace.command_handler(part_of=Payment)
class PaymentOutcomeHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        payment = _load_payment(command.intent_id)
        if payment is None:
            return False

        if not payment.mark_paid(charge_id=command.charge_id):
            logger.info("Duplicate payment success ignored", intent_id=command.intent_id)
            return False
        current_domain.repository_for(Payment).add(payment)

        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(payment.order_id)
        if order.is_cancelled:
            logger.warning(
                "Payment captured for a cancelled order",
                order_id=str(order.id),
                order_status=order.status,
                intent_id=command.intent_id,
            )
            return True

        order.confirm()
        order_repo.add(order)

        vendor_repo = current_domain.repository_for(Vendor)
        for vendor_id, payout_cents in order.vendor_payouts().items():
            vendor = vendor_repo.get(vendor_id)
            vendor.record_sale(payout_cents)
            vendor_repo.add(vendor)

        logger.info(
            "Payment confirmed",
            order_id=str(order.id),
            intent_id=command.intent_id,
            charge_id=command.charge_id,
            amount_cents=payment.amount_cents,
        )
        return True

    @handle(RecordPaymentFailure)
    def record_payment_failure(self, command):
        payment = _load_payment(command.intent_id)
        if payment is None:
            return False

        if not payment.mark_failed(reason=command.reason):
            logger.info(
                "Payment failure ignored",
                intent_id=command.intent_id,
                payment_status=payment.status,
            )
            return False

        current_domain.repository_for(Payment).add(payment)
        logger.info(
            "Payment failed",
            order_id=str(payment.order_id),
            intent_id=command.intent_id,
            reason=payment.failure_reason,
        )
        return True


def handle_payment_outcome(raw_payload: bytes, signature: str) -> dict:
    """Verify a webhook delivery and apply it.

    Raises ``WebhookSignatureError`` when the signature does not match;
    otherwise always acknowledges, including for event types it ignores.
    """
    try:
        event = get_gateway().parse_webhook(raw_payload, signature)
    except WebhookSignatureError:
        logger.warning("Rejected webhook with invalid signature")
        raise

    if event.event_type == PAYMENT_SUCCEEDED and event.intent_id:
        current_domain.process(
            ConfirmPayment(intent_id=event.intent_id, charge_id=event.charge_id),
            asynchronous=False,
        )
    elif event.event_type == PAYMENT_FAILED and event.intent_id:
        current_domain.process(
            RecordPaymentFailure(intent_id=event.intent_id, reason=event.failure_reason),
            asynchronous=False,
        )
    else:
        logger.info("Webhook event ignored", event_type=event.event_type, event_id=event.event_id)

    return {"received": True}
