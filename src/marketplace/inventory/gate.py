"""Inventory gate: validates a cart against live catalogue state.

``validate_cart`` checks every line before anything is mutated, so a single
bad line rejects the whole checkout. ``withdraw_stock`` and ``restore_stock``
move stock on the loaded Product aggregates; callers persist them in the same
Unit of Work as the order change that triggered them.
"""

from collections import OrderedDict
from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from marketplace.address.address import Address
from marketplace.product.product import Product
from marketplace.vendor.vendor import Vendor

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LineSnapshot:
    """Catalogue facts captured for one cart line at checkout time."""

    product_id: str
    vendor_id: str
    product_name: str
    product_image: str | None
    unit_price_cents: int
    quantity: int
    commission_rate: float


@dataclass(frozen=True)
class ValidatedCart:
    lines: list[LineSnapshot]
    products: dict  # product_id -> Product


def _parse_lines(cart_lines) -> list[tuple[str, int]]:
    if not cart_lines:
        raise ValidationError({"items": ["Cart is empty"]})

    parsed = []
    for line in cart_lines:
        product_id = line.get("product_id")
        quantity = line.get("quantity")
        if not product_id:
            raise ValidationError({"items": ["Each item needs a product_id"]})
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        parsed.append((str(product_id), quantity))
    return parsed


def _load_address(customer_id, address_id) -> Address:
    try:
        address = current_domain.repository_for(Address).get(address_id)
    except ObjectNotFoundError:
        address = None
    if address is None or not address.belongs_to(customer_id):
        raise ValidationError({"address_id": ["Shipping address not found"]})
    return address


def _load_products(product_ids) -> dict:
    repo = current_domain.repository_for(Product)
    products = {}
    for product_id in product_ids:
        try:
            products[product_id] = repo.get(product_id)
        except ObjectNotFoundError:
            logger.info("Checkout references unknown product", product_id=product_id)
            raise ValidationError({"items": ["One or more products not found"]}) from None
    return products


def _load_vendors(vendor_ids) -> dict:
    repo = current_domain.repository_for(Vendor)
    vendors = {}
    for vendor_id in vendor_ids:
        try:
            vendors[vendor_id] = repo.get(vendor_id)
        except ObjectNotFoundError:
            vendors[vendor_id] = None
    return vendors


def validate_cart(customer_id, address_id, cart_lines) -> ValidatedCart:
    """Check every cart line against the catalogue without mutating anything.

    Raises ``ValidationError`` naming the first offending product or the
    address. Quantities requested for the same product on several lines are
    summed before comparing against stock.
    """
    parsed = _parse_lines(cart_lines)
    _load_address(customer_id, address_id)

    requested = OrderedDict()
    for product_id, quantity in parsed:
        requested[product_id] = requested.get(product_id, 0) + quantity

    products = _load_products(requested.keys())
    vendors = _load_vendors({str(p.vendor_id) for p in products.values()})

    for product_id, total_quantity in requested.items():
        product = products[product_id]
        if not product.is_active:
            raise ValidationError({"items": [f'"{product.name}" is no longer available']})

        vendor = vendors.get(str(product.vendor_id))
        if vendor is None or not vendor.is_active:
            raise ValidationError({"items": [f'"{product.name}" vendor is currently unavailable']})

        if product.stock < total_quantity:
            raise ValidationError({"items": [f'Only {product.stock} units of "{product.name}" available']})

    lines = []
    for product_id, quantity in parsed:
        product = products[product_id]
        vendor = vendors[str(product.vendor_id)]
        lines.append(
            LineSnapshot(
                product_id=product_id,
                vendor_id=str(product.vendor_id),
                product_name=product.name,
                product_image=product.image_url,
                unit_price_cents=product.price_cents,
                quantity=quantity,
                commission_rate=vendor.commission_rate,
            )
        )

    return ValidatedCart(lines=lines, products=products)


def withdraw_stock(products: dict, lines) -> None:
    """Take each line's quantity out of stock and persist the products."""
    for line in lines:
        products[line.product_id].withdraw_stock(line.quantity)

    repo = current_domain.repository_for(Product)
    for product in products.values():
        repo.add(product)


def restore_stock(order) -> None:
    """Return every item of ``order`` to stock and persist the products."""
    repo = current_domain.repository_for(Product)
    products = {}
    for item in order.items:
        product_id = str(item.product_id)
        if product_id not in products:
            try:
                products[product_id] = repo.get(product_id)
            except ObjectNotFoundError:
                logger.warning(
                    "Product missing while restoring stock",
                    order_id=str(order.id),
                    product_id=product_id,
                )
                continue
        products[product_id].restore_stock(item.quantity)

    for product in products.values():
        repo.add(product)
