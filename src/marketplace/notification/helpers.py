"""Shared helper for notification event handlers."""

import structlog
from protean.utils.globals import current_domain

from marketplace.notification.notification import Notification

logger = structlog.get_logger(__name__)


def notify(recipient_id, notification_type: str, title: str, message: str, metadata: dict | None = None):
    """Create and persist one notification.

    Failures are logged and swallowed: a notification must never undo or
    block the business change that triggered it.
    """
    try:
        notification = Notification.create(
            recipient_id=str(recipient_id),
            notification_type=notification_type,
            title=title,
            message=message,
            metadata=metadata,
        )
        current_domain.repository_for(Notification).add(notification)
    except Exception as exc:
        logger.error(
            "Failed to create notification",
            recipient_id=str(recipient_id),
            notification_type=notification_type,
            error=str(exc),
        )
        return None

    logger.debug(
        "Notification created",
        notification_id=str(notification.id),
        recipient_id=str(recipient_id),
        notification_type=notification_type,
    )
    return str(notification.id)
