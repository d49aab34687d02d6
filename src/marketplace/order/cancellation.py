"""Order cancellation: command and handler.

Cancelling returns every item's quantity to stock in the same transaction
as the status change. Payments are not refunded here.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.inventory.gate import restore_stock
from marketplace.order.lookup import order_for_customer
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = order_for_customer(command.order_id, command.customer_id)
        order.cancel()
        restore_stock(order)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(command.customer_id),
        )
        return {"message": "Order cancelled successfully"}
