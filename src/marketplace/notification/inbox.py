"""Notification inbox: listing and read-state commands for a recipient."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.exceptions import NotFoundError
from marketplace.notification.notification import Notification


@marketplace.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)


@marketplace.command(part_of="Notification")
class MarkAllNotificationsRead:
    recipient_id = Identifier(required=True)


def _for_recipient(recipient_id, **filters):
    return (
        current_domain.repository_for(Notification)
        ._dao.query.filter(recipient_id=str(recipient_id), **filters)
        .order_by("-created_at")
        .all()
        .items
    )


def list_notifications(recipient_id, unread_only=False) -> list[dict]:
    filters = {"is_read": False} if unread_only else {}
    return [
        {
            "id": str(n.id),
            "type": n.notification_type,
            "title": n.title,
            "message": n.message,
            "metadata": n.metadata_dict,
            "is_read": n.is_read,
            "created_at": n.created_at.isoformat() if n.created_at else None,
        }
        for n in _for_recipient(recipient_id, **filters)
    ]


def unread_count(recipient_id) -> int:
    return len(_for_recipient(recipient_id, is_read=False))


@marketplace.command_handler(part_of=Notification)
class NotificationInboxHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(Notification)
        matches = (
            repo._dao.query.filter(id=str(command.notification_id), recipient_id=str(command.recipient_id))
            .all()
            .items
        )
        if not matches:
            raise NotFoundError({"notification_id": ["Notification not found"]})

        notification = repo.get(command.notification_id)
        notification.mark_read()
        repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command):
        repo = current_domain.repository_for(Notification)
        unread = _for_recipient(command.recipient_id, is_read=False)
        for found in unread:
            notification = repo.get(found.id)
            notification.mark_read()
            repo.add(notification)
        return len(unread)
