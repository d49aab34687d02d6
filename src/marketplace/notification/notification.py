"""Notification aggregate: an in-app message for a customer or vendor.

Notifications are created reactively from order, payment and vendor events
after the originating transaction commits. The only later change is the
recipient marking them read.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from marketplace.domain import marketplace


class NotificationType(Enum):
    ORDER_PLACED = "ORDER_PLACED"
    PAYMENT_SUCCESS = "PAYMENT_SUCCESS"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    ORDER_CANCELLED = "ORDER_CANCELLED"
    ORDER_STATUS_UPDATE = "ORDER_STATUS_UPDATE"
    NEW_VENDOR_ORDER = "NEW_VENDOR_ORDER"
    VENDOR_APPROVED = "VENDOR_APPROVED"
    VENDOR_REJECTED = "VENDOR_REJECTED"


@marketplace.aggregate
class Notification:
    recipient_id: Identifier(required=True)
    notification_type: String(required=True, max_length=50, choices=NotificationType)
    title: String(required=True, max_length=255)
    message: Text(required=True)
    context_data: Text()  # JSON dict
    is_read: Boolean(default=False)
    created_at: DateTime()
    read_at: DateTime()

    @classmethod
    def create(cls, recipient_id, notification_type, title, message, metadata=None):
        return cls(
            recipient_id=recipient_id,
            notification_type=notification_type,
            title=title,
            message=message,
            context_data=json.dumps(metadata or {}),
            is_read=False,
            created_at=datetime.now(UTC),
        )

    @property
    def metadata_dict(self) -> dict:
        return json.loads(self.context_data) if self.context_data else {}

    def mark_read(self):
        if self.is_read:
            return
        self.is_read = True
        self.read_at = datetime.now(UTC)
