"""Notifications reacting to Payment events."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.notification.helpers import notify
from marketplace.notification.notification import Notification, NotificationType
from marketplace.order.order import Order
from marketplace.payment.events import PaymentFailed, PaymentSucceeded


def _order_number(order_id):
    try:
        return current_domain.repository_for(Order).get(order_id).order_number
    except ObjectNotFoundError:
        return str(order_id)


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::payment")
class PaymentEventsHandler:
    @handle(PaymentSucceeded)
    def on_payment_succeeded(self, event: PaymentSucceeded) -> None:
        notify(
            event.customer_id,
            NotificationType.PAYMENT_SUCCESS.value,
            "Payment Successful",
            f"Payment for order {_order_number(event.order_id)} was successful.",
            {"order_id": str(event.order_id)},
        )

    @handle(PaymentFailed)
    def on_payment_failed(self, event: PaymentFailed) -> None:
        notify(
            event.customer_id,
            NotificationType.PAYMENT_FAILED.value,
            "Payment Failed",
            f"Payment for order {_order_number(event.order_id)} failed: {event.reason}",
            {"order_id": str(event.order_id)},
        )
