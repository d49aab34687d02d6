"""Shipping address owned by a customer."""

from protean.fields import Identifier, String

from marketplace.domain import marketplace


@marketplace.aggregate
class Address:
    customer_id: Identifier(required=True)
    full_name: String(max_length=200)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    phone: String(max_length=30)

    def belongs_to(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)
