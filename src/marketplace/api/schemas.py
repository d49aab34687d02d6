"""Pydantic request/response schemas for the marketplace API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands.
"""

from pydantic import BaseModel, Field

from marketplace.order.status import OrderStatus


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CartLine(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class PlaceOrderRequest(BaseModel):
    address_id: str
    items: list[CartLine] = Field(min_length=1)
    notes: str | None = Field(default=None, max_length=1000)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "address_id": "addr-001",
                    "items": [
                        {"product_id": "prod-001", "quantity": 2},
                        {"product_id": "prod-002", "quantity": 1},
                    ],
                    "notes": "Leave at the front desk",
                }
            ]
        }
    }


class OrderIdResponse(BaseModel):
    order_id: str


class OrderItemResponse(BaseModel):
    id: str
    vendor_id: str
    product_id: str
    product_name: str
    product_image: str | None = None
    unit_price: str
    quantity: int
    total_price: str
    commission_rate: float
    vendor_payout: str
    status: OrderStatus


class PaymentSummary(BaseModel):
    status: str
    amount: str
    paid_at: str | None = None
    failure_reason: str | None = None


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    address_id: str
    status: OrderStatus
    subtotal: str
    total_amount: str
    total_amount_cents: int
    currency: str
    notes: str | None = None
    items: list[OrderItemResponse]
    created_at: str | None = None
    cancelled_at: str | None = None
    payment: PaymentSummary | None = None


class VendorOrderResponse(BaseModel):
    order_id: str
    order_number: str
    order_status: OrderStatus
    created_at: str | None = None
    items: list[OrderItemResponse]


class UpdateItemStatusRequest(BaseModel):
    status: str = Field(max_length=20)


class ItemStatusResponse(BaseModel):
    item_id: str
    order_id: str
    status: OrderStatus
    order_status: OrderStatus


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class CreateIntentRequest(BaseModel):
    order_id: str


class CreateIntentResponse(BaseModel):
    client_secret: str
    intent_id: str


class WebhookAckResponse(BaseModel):
    received: bool


class PaymentStatusResponse(BaseModel):
    order_id: str
    order_status: OrderStatus
    payment: PaymentSummary | None = None


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class ResyncResponse(BaseModel):
    synced: int


class ModerateVendorRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class StatusResponse(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    metadata: dict
    is_read: bool
    created_at: str | None = None


class UnreadCountResponse(BaseModel):
    count: int
