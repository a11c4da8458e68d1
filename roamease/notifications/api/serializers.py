from __future__ import annotations

from rest_framework import serializers

from roamease.notifications.models import Notification
from roamease.notifications.types import Status


class NotificationSerializer(serializers.ModelSerializer):
    """Read serializer for notifications."""

    unread = serializers.SerializerMethodField()
    related_entity = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = (
            "id",
            "recipient",
            "notification_type",
            "title",
            "message",
            "priority",
            "status",
            "unread",
            "related_entity",
            "metadata",
            "actions",
            "created_at",
            "read_at",
        )
        read_only_fields = fields

    def get_unread(self, obj: Notification) -> bool:
        return obj.status == Status.UNREAD

    def get_related_entity(self, obj: Notification) -> dict[str, str] | None:
        if not obj.related_entity_type:
            return None
        return {"type": obj.related_entity_type, "id": obj.related_entity_id}


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()
