"""Product aggregate: the sellable unit and its on-hand stock.

The catalogue owns names, prices and images; the order lifecycle only moves
``stock`` and ``sold_count``. Stock can never go negative.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.aggregate
class Product:
    vendor_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    image_url = String(max_length=1000)
    price_cents = Integer(required=True, min_value=0)
    stock = Integer(default=0, min_value=0)
    sold_count = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    updated_at = DateTime()

    def withdraw_stock(self, quantity: int):
        if quantity > self.stock:
            raise ValidationError({"stock": [f'Only {self.stock} units of "{self.name}" available']})
        self.stock -= quantity
        self.sold_count = (self.sold_count or 0) + quantity
        self.updated_at = datetime.now(UTC)

    def restore_stock(self, quantity: int):
        self.stock += quantity
        self.sold_count = max((self.sold_count or 0) - quantity, 0)
        self.updated_at = datetime.now(UTC)
