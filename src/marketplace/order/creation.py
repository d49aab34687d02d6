"""Order creation: turn a validated cart into a PENDING order."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.config import setting
from marketplace.domain import marketplace
from marketplace.inventory.gate import validate_cart, withdraw_stock
from marketplace.order.order import Order, generate_order_number

logger = structlog.get_logger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5


@marketplace.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{"product_id": ..., "quantity": ...}]
    notes = Text()


def _unused_order_number() -> str:
    dao = current_domain.repository_for(Order)._dao
    prefix = setting("order_number_prefix")
    for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
        number = generate_order_number(prefix)
        if not dao.query.filter(order_number=number).all().items:
            return number
        logger.info("Order number collision, regenerating", order_number=number)
    # The unique constraint on order_number rejects a duplicate at commit
    return generate_order_number(prefix)


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = json.loads(command.items) if isinstance(command.items, str) else command.items

        cart = validate_cart(command.customer_id, command.address_id, lines)

        order = Order.place(
            order_number=_unused_order_number(),
            customer_id=command.customer_id,
            address_id=command.address_id,
            lines=cart.lines,
            currency=setting("currency"),
            notes=command.notes,
        )
        withdraw_stock(cart.products, cart.lines)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(command.customer_id),
            total_amount_cents=order.total_amount_cents,
            vendor_count=len(order.vendor_ids),
        )
        return str(order.id)
