"""Notifications reacting to Order events."""

import json

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.money import format_amount
from marketplace.notification.helpers import notify
from marketplace.notification.notification import Notification, NotificationType
from marketplace.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderItemStatusChanged,
    OrderPlaced,
)
from marketplace.order.order import Order
from marketplace.vendor.vendor import Vendor

logger = structlog.get_logger(__name__)


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::order")
class OrderEventsHandler:
    """Tells customers and vendors about order progress."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        notify(
            event.customer_id,
            NotificationType.ORDER_PLACED.value,
            "Order Placed",
            f"Your order {event.order_number} has been placed successfully.",
            {"order_id": str(event.order_id), "order_number": event.order_number},
        )

    @handle(OrderConfirmed)
    def on_order_confirmed(self, event: OrderConfirmed) -> None:
        """Each vendor on a paid order hears about its share."""
        try:
            order = current_domain.repository_for(Order).get(event.order_id)
        except ObjectNotFoundError:
            logger.warning("Confirmed order not found for vendor notifications", order_id=str(event.order_id))
            return

        vendor_repo = current_domain.repository_for(Vendor)
        for vendor_id, payout_cents in order.vendor_payouts().items():
            try:
                vendor = vendor_repo.get(vendor_id)
            except ObjectNotFoundError:
                logger.warning("Vendor not found for order notification", vendor_id=vendor_id)
                continue
            item_count = sum(1 for item in order.items if str(item.vendor_id) == vendor_id)
            notify(
                vendor.user_id,
                NotificationType.NEW_VENDOR_ORDER.value,
                "New Order",
                f"Order {event.order_number} includes {item_count} of your items "
                f"(payout {format_amount(payout_cents)}).",
                {"order_id": str(event.order_id), "vendor_id": vendor_id},
            )

    @handle(OrderItemStatusChanged)
    def on_item_status_changed(self, event: OrderItemStatusChanged) -> None:
        notify(
            event.customer_id,
            NotificationType.ORDER_STATUS_UPDATE.value,
            "Order Update",
            f'"{event.product_name}" from order {event.order_number} is now {event.new_status.lower()}.',
            {
                "order_id": str(event.order_id),
                "item_id": str(event.item_id),
                "status": event.new_status,
                "order_status": event.order_status,
            },
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        notify(
            event.customer_id,
            NotificationType.ORDER_CANCELLED.value,
            "Order Cancelled",
            f"Your order {event.order_number} has been cancelled.",
            {"order_id": str(event.order_id), "previous_status": event.previous_status},
        )
