"""Marketplace bounded context: multi-vendor orders, payments and fulfillment.

One domain hosts every aggregate the order lifecycle touches (Order, Payment,
Product, Vendor, Address, Notification) so a single Unit of Work can span
them: placing an order withdraws stock, a confirmed payment credits vendors,
and a cancellation restores stock, each in one transaction.
"""

import structlog
from protean.domain import Domain

marketplace = Domain(name="marketplace")

logger = structlog.get_logger(__name__)
