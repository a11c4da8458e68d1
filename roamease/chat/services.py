"""Conversation operations shared by the REST API and the realtime relay."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from django.db import transaction

from roamease.notifications.services import create_notification
from roamease.notifications.types import NotificationType
from roamease.notifications.types import RelatedEntityType

from .models import Conversation
from .models import Message

if TYPE_CHECKING:  # import for type checking only
    from roamease.users.models import User

PREVIEW_LENGTH = 100


def participant_ids(conversation_id: Any) -> list[str] | None:
    """Participant user ids as strings, or ``None`` for an unknown conversation."""

    try:
        pk = int(conversation_id)
    except (TypeError, ValueError):
        return None
    conversation = Conversation.objects.filter(pk=pk).first()
    if conversation is None:
        return None
    return [str(pk) for pk in conversation.participants.values_list("pk", flat=True)]


def serialize_message(message: Message) -> dict[str, Any]:
    sender = message.sender
    return {
        "id": message.pk,
        "conversationId": str(message.conversation_id),
        "sender": {"id": str(sender.pk), "name": sender.name or sender.username},
        "text": message.text,
        "createdAt": message.created_at.isoformat() if message.created_at else None,
    }


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


def send_message(conversation: Conversation, sender: User, text: str) -> Message:
    """Store a message and notify every other participant.

    Live delivery to the recipients' sockets is done by the client emitting
    ``broadcast-message`` once it has the stored message back.
    """

    text = (text or "").strip()
    if not text:
        msg = "Message text is required."
        raise ValueError(msg)
    if not conversation.participants.filter(pk=sender.pk).exists():
        msg = "Sender is not a participant of this conversation."
        raise PermissionError(msg)

    sender_name = sender.name or sender.username
    with transaction.atomic():
        message = Message.objects.create(
            conversation=conversation,
            sender=sender,
            text=text,
        )
        # Bump `updated_at` so the conversation sorts first.
        conversation.save(update_fields=["updated_at"])
        for recipient in conversation.participants.exclude(pk=sender.pk):
            create_notification(
                recipient,
                NotificationType.NEW_MESSAGE,
                f"New message from {sender_name}",
                _preview(text),
                related_entity=(RelatedEntityType.CONVERSATION, conversation.pk),
                metadata={
                    "conversationId": str(conversation.pk),
                    "senderId": str(sender.pk),
                    "senderName": sender_name,
                    "messageId": str(message.pk),
                },
                actions=[
                    {
                        "label": "View Message",
                        "action": "view",
                        "url": f"/chat?conversation={conversation.pk}",
                        "method": "GET",
                    },
                ],
            )
    return message


def start_conversation(initiator: User, recipient: User) -> tuple[Conversation, bool]:
    """Return the conversation between two users, creating it if needed."""

    if initiator.pk == recipient.pk:
        msg = "Cannot start a conversation with yourself."
        raise ValueError(msg)

    existing = (
        Conversation.objects.filter(participants=initiator)
        .filter(participants=recipient)
        .first()
    )
    if existing is not None:
        return existing, False

    initiator_name = initiator.name or initiator.username
    with transaction.atomic():
        conversation = Conversation.objects.create()
        conversation.participants.add(initiator, recipient)
        create_notification(
            recipient,
            NotificationType.CONVERSATION_STARTED,
            f"{initiator_name} started a conversation with you",
            related_entity=(RelatedEntityType.CONVERSATION, conversation.pk),
            metadata={
                "conversationId": str(conversation.pk),
                "initiatorId": str(initiator.pk),
            },
        )
    return conversation, True
