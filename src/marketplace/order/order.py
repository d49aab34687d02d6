"""Order aggregate: one checkout, possibly spanning several vendors.

The Order owns its OrderItems. Each item carries its own fulfillment status,
advanced by the vendor that sells it; the order's status is *derived* from the
items (see ``marketplace.order.status``) except for CANCELLED, which is set on
the order directly and leaves item statuses untouched.

State Machine (items, and the derived order status):
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
Order only:
    PENDING/CONFIRMED → CANCELLED (terminal)
"""

import json
import random
import string
from collections import defaultdict
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.exceptions import InvalidStateError, InvalidTransitionError
from marketplace.money import line_total, vendor_payout
from marketplace.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderItemStatusChanged,
    OrderPlaced,
    OrderStatusResynced,
)
from marketplace.order.status import (
    CANCELLABLE,
    OrderStatus,
    derive_order_status,
    next_status,
    parse_status,
)

_SUFFIX_ALPHABET = string.digits + string.ascii_uppercase


def generate_order_number(prefix="ORD", now=None) -> str:
    """``ORD-YYYYMMDD-XXXX`` with a random four character base-36 suffix."""
    now = now or datetime.now(UTC)
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=4))
    return f"{prefix}-{now:%Y%m%d}-{suffix}"


@marketplace.entity(part_of="Order")
class OrderItem:
    vendor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_image = String(max_length=1000)
    unit_price_cents = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    total_price_cents = Integer(required=True, min_value=0)
    commission_rate = Float(required=True, min_value=0.0, max_value=100.0)
    vendor_payout_cents = Integer(required=True, min_value=0)
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    updated_at = DateTime()


@marketplace.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    items = HasMany(OrderItem)
    subtotal_cents = Integer(required=True, min_value=0)
    total_amount_cents = Integer(required=True, min_value=0)
    currency = String(max_length=3, default="usd")
    notes = Text()
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, order_number, customer_id, address_id, lines, currency="usd", notes=None):
        """Build a PENDING order from validated line snapshots.

        ``lines`` are ``LineSnapshot`` instances from the inventory gate.
        """
        if not lines:
            raise ValidationError({"items": ["Cart is empty"]})

        now = datetime.now(UTC)
        items = []
        for line in lines:
            total = line_total(line.unit_price_cents, line.quantity)
            items.append(
                OrderItem(
                    vendor_id=line.vendor_id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    product_image=line.product_image,
                    unit_price_cents=line.unit_price_cents,
                    quantity=line.quantity,
                    total_price_cents=total,
                    commission_rate=line.commission_rate,
                    vendor_payout_cents=vendor_payout(total, line.commission_rate),
                    status=OrderStatus.PENDING.value,
                    updated_at=now,
                )
            )

        subtotal = sum(item.total_price_cents for item in items)
        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            address_id=address_id,
            items=items,
            subtotal_cents=subtotal,
            total_amount_cents=subtotal,
            currency=currency,
            notes=notes,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                vendor_ids=json.dumps(order.vendor_ids),
                item_count=len(items),
                total_amount_cents=order.total_amount_cents,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED.value

    @property
    def vendor_ids(self) -> list[str]:
        seen = []
        for item in self.items:
            if str(item.vendor_id) not in seen:
                seen.append(str(item.vendor_id))
        return seen

    def vendor_payouts(self) -> dict[str, int]:
        """Sum of item payouts per vendor, in cents."""
        payouts = defaultdict(int)
        for item in self.items:
            payouts[str(item.vendor_id)] += item.vendor_payout_cents
        return dict(payouts)

    def item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def derived_status(self) -> OrderStatus | None:
        return derive_order_status(item.status for item in self.items)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def confirm(self):
        """Confirm every still-PENDING item after payment capture.

        Items a vendor already advanced keep their status, and the order status
        is re-derived from the items.
        """
        if self.is_cancelled:
            raise InvalidStateError({"status": [f"Order cannot be confirmed from {self.status}"]})

        now = datetime.now(UTC)
        for item in self.items:
            if item.status == OrderStatus.PENDING.value:
                item.status = OrderStatus.CONFIRMED.value
                item.updated_at = now
        self.status = self.derived_status().value
        self.updated_at = now

        self.raise_(
            OrderConfirmed(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                confirmed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def advance_item(self, item_id, target):
        """Move one item to ``target`` and re-derive the order status.

        ``target`` must be exactly the next status after the item's current
        one. Returns the updated item.
        """
        if self.is_cancelled:
            raise InvalidStateError({"status": ["Cannot update items of a cancelled order"]})

        item = self.item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in order"]})

        current = OrderStatus(item.status)
        requested = parse_status(target)
        if requested is None or requested != next_status(current):
            raise InvalidTransitionError(current.value, requested.value if requested else str(target))

        now = datetime.now(UTC)
        item.status = requested.value
        item.updated_at = now
        self.status = self.derived_status().value
        self.updated_at = now

        self.raise_(
            OrderItemStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                item_id=str(item.id),
                vendor_id=str(item.vendor_id),
                product_name=item.product_name,
                previous_status=current.value,
                new_status=requested.value,
                order_status=self.status,
            )
        )
        return item

    def resync_status(self) -> bool:
        """Re-derive the aggregate status from the items.

        Cancelled and item-less orders are left alone. Returns True when the
        stored status changed.
        """
        if self.is_cancelled:
            return False

        derived = self.derived_status()
        if derived is None or derived.value == self.status:
            return False

        previous = self.status
        self.status = derived.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            OrderStatusResynced(
                order_id=str(self.id),
                previous_status=previous,
                new_status=derived.value,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self):
        """Cancel the whole order. Stock restoration is the caller's job."""
        if self.current_status not in CANCELLABLE:
            raise InvalidStateError({"status": [f"Order cannot be cancelled at this stage ({self.status})"]})

        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                previous_status=previous,
                cancelled_at=now,
            )
        )
