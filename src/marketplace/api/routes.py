"""FastAPI routes for the marketplace: orders, payments, admin and notifications."""

import json

from fastapi import APIRouter, Depends, Header, Request
from protean.utils.globals import current_domain

from marketplace.api.deps import Caller, current_vendor, get_caller, require_role
from marketplace.api.schemas import (
    CreateIntentRequest,
    CreateIntentResponse,
    ItemStatusResponse,
    MessageResponse,
    ModerateVendorRequest,
    NotificationResponse,
    OrderIdResponse,
    OrderResponse,
    PaymentStatusResponse,
    PlaceOrderRequest,
    ResyncResponse,
    StatusResponse,
    UnreadCountResponse,
    UpdateItemStatusRequest,
    VendorOrderResponse,
    WebhookAckResponse,
)
from marketplace.notification.inbox import (
    MarkAllNotificationsRead,
    MarkNotificationRead,
    list_notifications,
    unread_count,
)
from marketplace.order.cancellation import CancelOrder
from marketplace.order.creation import PlaceOrder
from marketplace.order.fulfillment import UpdateItemStatus
from marketplace.order.queries import get_order_detail, list_customer_orders, list_vendor_items
from marketplace.order.reconciliation import ResyncAllOrderStatuses
from marketplace.payment.intent import CreatePaymentIntent
from marketplace.payment.queries import get_payment_status
from marketplace.payment.webhook import handle_payment_outcome
from marketplace.vendor.moderation import ApproveVendor, RejectVendor, SuspendVendor
from marketplace.vendor.vendor import Vendor

customer_only = require_role("customer")
admin_only = require_role("admin")

# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, caller: Caller = Depends(customer_only)) -> OrderIdResponse:
    """Check out a cart into a new PENDING order."""
    command = PlaceOrder(
        customer_id=caller.user_id,
        address_id=body.address_id,
        items=json.dumps([line.model_dump() for line in body.items]),
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(status: str | None = None, caller: Caller = Depends(customer_only)):
    return list_customer_orders(caller.user_id, status=status)


@order_router.get("/vendor/incoming", response_model=list[VendorOrderResponse])
async def vendor_incoming(status: str | None = None, vendor: Vendor = Depends(current_vendor)):
    """The calling vendor's items on paid orders."""
    return list_vendor_items(vendor.id, status=status)


@order_router.patch("/vendor/items/{item_id}/status", response_model=ItemStatusResponse)
async def update_item_status(
    item_id: str,
    body: UpdateItemStatusRequest,
    vendor: Vendor = Depends(current_vendor),
):
    """Advance one of the vendor's items to the next fulfillment status."""
    command = UpdateItemStatus(item_id=item_id, vendor_id=str(vendor.id), status=body.status)
    return current_domain.process(command, asynchronous=False)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str, caller: Caller = Depends(customer_only)):
    return get_order_detail(order_id, caller.user_id)


@order_router.patch("/{order_id}/cancel", response_model=MessageResponse)
async def cancel_order(order_id: str, caller: Caller = Depends(customer_only)):
    command = CancelOrder(order_id=order_id, customer_id=caller.user_id)
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/create-intent", response_model=CreateIntentResponse)
async def create_intent(body: CreateIntentRequest, caller: Caller = Depends(customer_only)):
    """Open (or reuse) the payment intent for a pending order."""
    command = CreatePaymentIntent(order_id=body.order_id, customer_id=caller.user_id)
    return current_domain.process(command, asynchronous=False)


@payment_router.post("/webhook", response_model=WebhookAckResponse)
async def payment_webhook(request: Request, stripe_signature: str = Header(default="")):
    """Receive a signed payment processor event.

    The raw body is needed for signature verification, so it is read
    directly instead of through a request model.
    """
    payload = await request.body()
    return handle_payment_outcome(payload, stripe_signature)


@payment_router.get("/status/{order_id}", response_model=PaymentStatusResponse)
async def payment_status(order_id: str, caller: Caller = Depends(customer_only)):
    return get_payment_status(order_id, caller.user_id)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_only)])


@admin_router.post("/orders/resync-statuses", response_model=ResyncResponse)
async def resync_statuses():
    """Re-derive every live order's status from its items."""
    return current_domain.process(ResyncAllOrderStatuses(), asynchronous=False)


@admin_router.put("/vendors/{vendor_id}/approve", response_model=StatusResponse)
async def approve_vendor(vendor_id: str):
    current_domain.process(ApproveVendor(vendor_id=vendor_id), asynchronous=False)
    return StatusResponse(status="approved")


@admin_router.put("/vendors/{vendor_id}/reject", response_model=StatusResponse)
async def reject_vendor(vendor_id: str, body: ModerateVendorRequest):
    current_domain.process(RejectVendor(vendor_id=vendor_id, reason=body.reason), asynchronous=False)
    return StatusResponse(status="rejected")


@admin_router.put("/vendors/{vendor_id}/suspend", response_model=StatusResponse)
async def suspend_vendor(vendor_id: str, body: ModerateVendorRequest):
    current_domain.process(SuspendVendor(vendor_id=vendor_id, reason=body.reason), asynchronous=False)
    return StatusResponse(status="suspended")


# ---------------------------------------------------------------------------
# Notification Router
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("", response_model=list[NotificationResponse])
async def my_notifications(unread_only: bool = False, caller: Caller = Depends(get_caller)):
    return list_notifications(caller.user_id, unread_only=unread_only)


@notification_router.get("/unread-count", response_model=UnreadCountResponse)
async def my_unread_count(caller: Caller = Depends(get_caller)):
    return UnreadCountResponse(count=unread_count(caller.user_id))


@notification_router.patch("/read-all", response_model=StatusResponse)
async def mark_all_read(caller: Caller = Depends(get_caller)):
    current_domain.process(MarkAllNotificationsRead(recipient_id=caller.user_id), asynchronous=False)
    return StatusResponse(status="read")


@notification_router.patch("/{notification_id}/read", response_model=StatusResponse)
async def mark_read(notification_id: str, caller: Caller = Depends(get_caller)):
    current_domain.process(
        MarkNotificationRead(notification_id=notification_id, recipient_id=caller.user_id),
        asynchronous=False,
    )
    return StatusResponse(status="read")
