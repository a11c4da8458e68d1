from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from roamease.chat.models import Conversation
from roamease.chat.services import send_message
from roamease.chat.services import start_conversation

from .serializers import ConversationCreateSerializer
from .serializers import ConversationSerializer
from .serializers import MessageCreateSerializer
from .serializers import MessageSerializer


class ConversationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    """Conversations the caller takes part in. Others are simply not found."""

    permission_classes = [IsAuthenticated]
    serializer_class = ConversationSerializer

    def get_queryset(self):
        return Conversation.objects.filter(
            participants=self.request.user,
        ).prefetch_related("participants")

    @extend_schema(request=ConversationCreateSerializer)
    def create(self, request, *args, **kwargs):
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            conversation, created = start_conversation(
                request.user,
                serializer.validated_data["recipient_id"],
            )
        except ValueError as exc:
            raise ValidationError({"recipient_id": str(exc)}) from exc
        return Response(
            ConversationSerializer(conversation).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(request=MessageCreateSerializer, responses=MessageSerializer)
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        conversation = self.get_object()
        if request.method == "GET":
            page = self.paginate_queryset(
                conversation.messages.select_related("sender"),
            )
            data = MessageSerializer(page, many=True).data
            return self.get_paginated_response(data)

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            message = send_message(
                conversation,
                request.user,
                serializer.validated_data["text"],
            )
        except ValueError as exc:
            raise ValidationError({"text": str(exc)}) from exc
        return Response(
            MessageSerializer(message).data,
            status=status.HTTP_201_CREATED,
        )
