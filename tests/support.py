"""Seed helpers shared by the marketplace test-suite.

Products, vendors and addresses belong to collaborating services; tests seed
them directly through their repositories.
"""

import json

from protean import current_domain
from protean.exceptions import InvalidOperationError, ValidationError

from marketplace.address.address import Address
from marketplace.order.creation import PlaceOrder
from marketplace.order.order import Order
from marketplace.product.product import Product
from marketplace.vendor.moderation import ApproveVendor
from marketplace.vendor.vendor import Vendor


def seed_vendor(user_id="vendor-user-1", store_name="Acme Goods", commission_rate=10.0, active=True):
    vendor = Vendor.register(user_id=user_id, store_name=store_name, commission_rate=commission_rate)
    current_domain.repository_for(Vendor).add(vendor)
    if active:
        current_domain.process(ApproveVendor(vendor_id=str(vendor.id)), asynchronous=False)
    return current_domain.repository_for(Vendor).get(vendor.id)


def seed_product(vendor, name="Widget", price_cents=2999, stock=10, is_active=True):
    product = Product(
        vendor_id=str(vendor.id),
        name=name,
        image_url=f"https://cdn.example.com/{name.lower().replace(' ', '-')}.jpg",
        price_cents=price_cents,
        stock=stock,
        is_active=is_active,
    )
    current_domain.repository_for(Product).add(product)
    return current_domain.repository_for(Product).get(product.id)


def seed_address(customer_id="cust-001"):
    address = Address(
        customer_id=customer_id,
        full_name="Jane Doe",
        street="123 Main St",
        city="Springfield",
        state="IL",
        postal_code="62701",
        country="US",
    )
    current_domain.repository_for(Address).add(address)
    return address


def cart(*lines):
    """JSON cart payload from ``(product, quantity)`` pairs."""
    return json.dumps([{"product_id": str(product.id), "quantity": quantity} for product, quantity in lines])


def place_order(customer_id, address, lines, notes=None):
    """Place an order through the command and return the reloaded Order."""
    order_id = current_domain.process(
        PlaceOrder(
            customer_id=customer_id,
            address_id=str(address.id),
            items=cart(*lines),
            notes=notes,
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(Order).get(order_id)


def reload(aggregate_cls, identifier):
    return current_domain.repository_for(aggregate_cls).get(identifier)


def webhook_payload(event_type, intent_id, charge_id=None, failure_message=None, event_id="evt_test_1"):
    """A processor event envelope as the webhook endpoint receives it."""
    data = {"id": intent_id, "object": "payment_intent"}
    if charge_id:
        data["latest_charge"] = charge_id
    if failure_message:
        data["last_payment_error"] = {"message": failure_message}
    return json.dumps({"id": event_id, "type": event_type, "data": {"object": data}}).encode("utf-8")


def as_customer(user_id="cust-001"):
    return {"X-User-Id": user_id, "X-User-Role": "customer"}


def as_vendor(user_id):
    return {"X-User-Id": user_id, "X-User-Role": "vendor"}


def as_admin(user_id="admin-001"):
    return {"X-User-Id": user_id, "X-User-Role": "admin"}


def attempt(outcome, action):
    """Run ``action``, recording its result or the domain error it raised."""
    try:
        outcome["result"] = action()
    except (ValidationError, InvalidOperationError) as exc:
        outcome["exc"] = exc
    return outcome
