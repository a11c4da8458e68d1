from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from roamease.notifications.types import is_admin_notification
from roamease.realtime.emitter import emit_notification_to_user

if TYPE_CHECKING:  # import for type checking only
    from roamease.notifications.models import Notification


def build_notification_payload(notification: Notification) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": notification.id,
        "type": notification.notification_type,
        "title": notification.title,
        "message": notification.message,
        "priority": notification.priority,
        "status": notification.status,
        "createdAt": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }
    if notification.related_entity_type:
        payload["relatedEntity"] = {
            "type": notification.related_entity_type,
            "id": notification.related_entity_id or None,
        }
    if notification.metadata:
        payload["metadata"] = notification.metadata
    if notification.actions:
        payload["actions"] = notification.actions
    return payload


def publish_notification_created(notification: Notification) -> None:
    """Publish a newly created Notification to the recipient in realtime.

    Admin-relevant types are also delivered to the admin room.
    """

    payload = build_notification_payload(notification)
    emit_notification_to_user(
        notification.recipient_id,
        payload,
        admin_copy=is_admin_notification(notification.notification_type),
    )
