"""Read-side helpers for orders: customer history, detail and vendor inbox."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from marketplace.money import format_amount
from marketplace.order.lookup import order_for_customer
from marketplace.order.order import Order, OrderItem
from marketplace.order.status import RANK, OrderStatus, parse_status

DEFAULT_LIMIT = 100


def item_to_dict(item) -> dict:
    return {
        "id": str(item.id),
        "vendor_id": str(item.vendor_id),
        "product_id": str(item.product_id),
        "product_name": item.product_name,
        "product_image": item.product_image,
        "unit_price": format_amount(item.unit_price_cents),
        "quantity": item.quantity,
        "total_price": format_amount(item.total_price_cents),
        "commission_rate": item.commission_rate,
        "vendor_payout": format_amount(item.vendor_payout_cents),
        "status": item.status,
    }


def order_to_dict(order, items=None) -> dict:
    items = order.items if items is None else items
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "address_id": str(order.address_id),
        "status": order.status,
        "subtotal": format_amount(order.subtotal_cents),
        "total_amount": format_amount(order.total_amount_cents),
        "total_amount_cents": order.total_amount_cents,
        "currency": order.currency,
        "notes": order.notes,
        "items": [item_to_dict(item) for item in items],
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "cancelled_at": order.cancelled_at.isoformat() if order.cancelled_at else None,
    }


def _status_filter(status):
    if status is None:
        return None
    parsed = parse_status(status)
    if parsed is None:
        raise ValidationError({"status": [f"Unknown order status {status}"]})
    return parsed.value


def list_customer_orders(customer_id, status=None, limit=DEFAULT_LIMIT) -> list[dict]:
    """A customer's orders, newest first, optionally filtered by status."""
    filters = {"customer_id": str(customer_id)}
    status_value = _status_filter(status)
    if status_value:
        filters["status"] = status_value

    orders = (
        current_domain.repository_for(Order)
        ._dao.query.filter(**filters)
        .order_by("-created_at")
        .limit(limit)
        .all()
        .items
    )
    return [order_to_dict(order) for order in orders]


def get_order_detail(order_id, customer_id) -> dict:
    from marketplace.payment.queries import payment_for_order

    order = order_for_customer(order_id, customer_id)
    detail = order_to_dict(order)
    payment = payment_for_order(order_id)
    detail["payment"] = (
        {
            "status": payment.status,
            "amount": format_amount(payment.amount_cents),
            "paid_at": payment.paid_at.isoformat() if payment.paid_at else None,
        }
        if payment
        else None
    )
    return detail


def _all_items(**filters):
    dao = current_domain.repository_for(OrderItem)._dao
    items, offset = [], 0
    while True:
        page = dao.query.filter(**filters).offset(offset).limit(DEFAULT_LIMIT).all().items
        items.extend(page)
        if len(page) < DEFAULT_LIMIT:
            return items
        offset += DEFAULT_LIMIT


def list_vendor_items(vendor_id, status=None, limit=DEFAULT_LIMIT) -> list[dict]:
    """Items sold by ``vendor_id`` on paid orders, grouped per order, newest first.

    Orders still awaiting payment and cancelled orders are excluded before
    ``limit`` is applied, so it bounds the number of paid orders returned.
    """
    filters = {"vendor_id": str(vendor_id)}
    status_value = _status_filter(status)
    if status_value:
        filters["status"] = status_value

    items = _all_items(**filters)

    order_repo = current_domain.repository_for(Order)
    orders = {}
    for item in items:
        if item.order_id not in orders:
            orders[item.order_id] = order_repo.get(item.order_id)

    paid = {
        order_id: order
        for order_id, order in orders.items()
        if order.current_status in RANK and order.current_status != OrderStatus.PENDING
    }

    results = []
    for order in sorted(paid.values(), key=lambda o: o.created_at, reverse=True)[:limit]:
        vendor_items = [i for i in items if str(i.order_id) == str(order.id)]
        results.append(
            {
                "order_id": str(order.id),
                "order_number": order.order_number,
                "order_status": order.status,
                "created_at": order.created_at.isoformat() if order.created_at else None,
                "items": [item_to_dict(i) for i in vendor_items],
            }
        )
    return results
