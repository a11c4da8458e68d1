from django.conf import settings
from django.db import models
from django.utils import timezone

from .types import NotificationType
from .types import Priority
from .types import RelatedEntityType
from .types import Status


class NotificationQuerySet(models.QuerySet):
    def unread(self):
        return self.filter(status=Status.UNREAD)

    def mark_all_read(self) -> int:
        return self.unread().update(status=Status.READ, read_at=timezone.now())


class Notification(models.Model):
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    notification_type = models.CharField(max_length=50, choices=NotificationType.choices)
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True, default="")
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
    )
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.UNREAD,
    )
    related_entity_type = models.CharField(
        max_length=20,
        choices=RelatedEntityType.choices,
        blank=True,
        default="",
    )
    related_entity_id = models.CharField(max_length=64, blank=True, default="")
    metadata = models.JSONField(default=dict, blank=True)
    # Each action: {"label", "action", "url", "method"}
    actions = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    read_at = models.DateTimeField(null=True, blank=True)
    archived_at = models.DateTimeField(null=True, blank=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["recipient", "status"],
                name="notif_recipient_status_idx",
            ),
            models.Index(
                fields=["recipient", "-created_at"],
                name="notif_recipient_created_idx",
            ),
        ]

    def __str__(self):
        return f"{self.title} - {self.recipient}"

    def mark_read(self) -> None:
        if self.status == Status.UNREAD:
            self.status = Status.READ
            self.read_at = timezone.now()
            self.save(update_fields=["status", "read_at"])

    def archive(self) -> None:
        if self.status != Status.ARCHIVED:
            self.status = Status.ARCHIVED
            self.archived_at = timezone.now()
            self.save(update_fields=["status", "archived_at"])
