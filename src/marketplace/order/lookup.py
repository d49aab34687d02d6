"""Ownership-checked loaders shared by order and payment handlers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.exceptions import NotFoundError
from marketplace.order.order import Order, OrderItem


def order_for_customer(order_id, customer_id) -> Order:
    """Load an order owned by ``customer_id``; anyone else gets NotFoundError."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        order = None
    if order is None or str(order.customer_id) != str(customer_id):
        raise NotFoundError({"order_id": ["Order not found"]})
    return order


def order_for_vendor_item(item_id, vendor_id) -> Order:
    """Load the order containing ``item_id`` when the item belongs to ``vendor_id``."""
    items = (
        current_domain.repository_for(OrderItem)
        ._dao.query.filter(id=str(item_id), vendor_id=str(vendor_id))
        .all()
        .items
    )
    if not items:
        raise NotFoundError({"item_id": ["Order item not found"]})

    return current_domain.repository_for(Order).get(items[0].order_id)
