"""Order and order-item statuses, and the rule deriving one from the other.

Items move strictly forward one step at a time::

    PENDING -> CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED

``CANCELLED`` is terminal and applies to the order as a whole; it has no rank
and is never a legal item target. An order that is not cancelled always
carries the *least advanced* status among its items, so a multi-vendor order
only reads "SHIPPED" once every vendor has shipped.
"""

from enum import Enum


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.CONFIRMED: 1,
    OrderStatus.PROCESSING: 2,
    OrderStatus.SHIPPED: 3,
    OrderStatus.DELIVERED: 4,
}

_NEXT = {
    OrderStatus.PENDING: OrderStatus.CONFIRMED,
    OrderStatus.CONFIRMED: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}

CANCELLABLE = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})


def parse_status(value) -> OrderStatus | None:
    """Return the enum member for ``value`` or None when it is not a known status."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).upper())
    except ValueError:
        return None


def next_status(status: OrderStatus) -> OrderStatus | None:
    """The single legal successor of ``status``; None for DELIVERED and CANCELLED."""
    return _NEXT.get(status)


def derive_order_status(item_statuses) -> OrderStatus | None:
    """Minimum-rank status among the non-cancelled item statuses.

    Returns None when there is nothing to derive from.
    """
    ranked = [s for s in (parse_status(v) for v in item_statuses) if s in RANK]
    if not ranked:
        return None
    return min(ranked, key=RANK.__getitem__)
