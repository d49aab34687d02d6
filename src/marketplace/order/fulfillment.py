"""Vendor fulfillment: advance one order item and re-derive the order status."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.lookup import order_for_vendor_item
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateItemStatus:
    item_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@marketplace.command_handler(part_of=Order)
class UpdateItemStatusHandler:
    @handle(UpdateItemStatus)
    def update_item_status(self, command):
        order = order_for_vendor_item(command.item_id, command.vendor_id)
        item = order.advance_item(command.item_id, command.status)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order item status updated",
            order_id=str(order.id),
            item_id=str(item.id),
            vendor_id=str(command.vendor_id),
            item_status=item.status,
            order_status=order.status,
        )
        return {
            "item_id": str(item.id),
            "order_id": str(order.id),
            "status": item.status,
            "order_status": order.status,
        }
