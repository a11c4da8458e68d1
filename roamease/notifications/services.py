from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from .models import Notification
from .types import NotificationType
from .types import Priority
from .types import RelatedEntityType

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

    from roamease.users.models import User

logger = logging.getLogger(__name__)

ACTION_KEYS = ("label", "action", "url", "method")


def _clean_actions(actions: Iterable[dict[str, Any]] | None) -> list[dict[str, str]]:
    cleaned = []
    for raw in actions or ():
        action = {key: str(raw[key]) for key in ACTION_KEYS if raw.get(key)}
        if "method" in action:
            action["method"] = action["method"].upper()
        cleaned.append(action)
    return cleaned


def create_notification(  # noqa: PLR0913
    recipient: User,
    notification_type: str,
    title: str,
    message: str = "",
    *,
    priority: str = Priority.MEDIUM,
    related_entity: tuple[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
    actions: Iterable[dict[str, Any]] | None = None,
) -> Notification:
    """Persist a notification; realtime delivery follows on commit.

    ``related_entity`` is an ``(entity_type, entity_id)`` pair.
    """

    if recipient is None or not notification_type or not title:
        msg = "Missing required notification fields: recipient, notification_type, title"
        raise ValueError(msg)
    if notification_type not in NotificationType.values:
        msg = f"Unknown notification type: {notification_type}"
        raise ValueError(msg)
    if priority not in Priority.values:
        msg = f"Unknown priority: {priority}"
        raise ValueError(msg)

    entity_type, entity_id = "", ""
    if related_entity is not None:
        entity_type, raw_id = related_entity
        if entity_type not in RelatedEntityType.values:
            msg = f"Unknown related entity type: {entity_type}"
            raise ValueError(msg)
        entity_id = "" if raw_id is None else str(raw_id)

    notification = Notification.objects.create(
        recipient=recipient,
        notification_type=notification_type,
        title=title,
        message=message,
        priority=priority,
        related_entity_type=entity_type,
        related_entity_id=entity_id,
        metadata=metadata or {},
        actions=_clean_actions(actions),
    )
    logger.info(
        "Notification %s (%s) created for user %s",
        notification.pk,
        notification_type,
        recipient.pk,
    )
    return notification
