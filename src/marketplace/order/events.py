"""Domain events for the Order aggregate.

Raised inside the Unit of Work and dispatched after commit. Notification
handlers consume them; nothing in the order lifecycle depends on them.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A customer checked out a cart into a new order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=30)
    customer_id = Identifier(required=True)
    vendor_ids = Text(required=True)  # JSON: list of vendor ids
    item_count = Integer(required=True)
    total_amount_cents = Integer(required=True)
    currency = String(max_length=3)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderConfirmed:
    """Payment for the order was captured; every item is now CONFIRMED."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=30)
    customer_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderItemStatusChanged:
    """A vendor advanced one of its items through fulfillment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=30)
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    product_name = String(max_length=255)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    order_status = String(required=True, max_length=20)


@marketplace.event(part_of="Order")
class OrderStatusResynced:
    """The reconciliation sweep corrected a stale aggregate status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)


@marketplace.event(part_of="Order")
class OrderCancelled:
    """The customer cancelled the order and its stock was returned."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=30)
    customer_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    cancelled_at = DateTime(required=True)
