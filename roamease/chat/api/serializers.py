from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from roamease.chat.models import Conversation
from roamease.chat.models import Message
from roamease.chat.services import serialize_message

User = get_user_model()


class ParticipantSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "username", "name", "role", "is_online", "last_seen")
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    participants = ParticipantSerializer(many=True, read_only=True)

    class Meta:
        model = Conversation
        fields = ("id", "participants", "created_at", "updated_at")
        read_only_fields = fields


class ConversationCreateSerializer(serializers.Serializer):
    recipient_id = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())


class MessageSerializer(serializers.ModelSerializer):
    """Same shape clients relay over Socket.IO."""

    class Meta:
        model = Message
        fields = ("id", "conversation", "sender", "text", "created_at")

    def to_representation(self, instance: Message):
        return serialize_message(instance)


class MessageCreateSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=5000)
