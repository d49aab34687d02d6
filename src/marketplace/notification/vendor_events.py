"""Notifications reacting to Vendor moderation events."""

from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.notification.helpers import notify
from marketplace.notification.notification import Notification, NotificationType
from marketplace.vendor.events import VendorApproved, VendorRejected


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::vendor")
class VendorEventsHandler:
    @handle(VendorApproved)
    def on_vendor_approved(self, event: VendorApproved) -> None:
        notify(
            event.user_id,
            NotificationType.VENDOR_APPROVED.value,
            "Store Approved!",
            f'Your store "{event.store_name}" has been approved.',
            {"vendor_id": str(event.vendor_id)},
        )

    @handle(VendorRejected)
    def on_vendor_rejected(self, event: VendorRejected) -> None:
        notify(
            event.user_id,
            NotificationType.VENDOR_REJECTED.value,
            "Application Update",
            f'Your store "{event.store_name}" application was not approved.',
            {"vendor_id": str(event.vendor_id)},
        )
