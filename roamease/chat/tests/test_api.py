import pytest
from rest_framework import status

from roamease.chat.models import Conversation
from roamease.chat.models import Message

pytestmark = pytest.mark.django_db

BASE = "/api/v1/conversations/"


def test_create_conversation(api_client, carrier):
    resp = api_client.post(BASE, {"recipient_id": carrier.pk}, format="json")
    assert resp.status_code == status.HTTP_201_CREATED
    participants = {p["id"] for p in resp.data["participants"]}
    assert carrier.pk in participants

    again = api_client.post(BASE, {"recipient_id": carrier.pk}, format="json")
    assert again.status_code == status.HTTP_200_OK
    assert again.data["id"] == resp.data["id"]


def test_create_conversation_validation(api_client, user):
    resp = api_client.post(BASE, {"recipient_id": user.pk}, format="json")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    resp = api_client.post(BASE, {"recipient_id": 999999}, format="json")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


def test_list_only_own_conversations(api_client, user, carrier, admin_user):
    mine = Conversation.objects.create()
    mine.participants.add(user, carrier)
    other = Conversation.objects.create()
    other.participants.add(carrier, admin_user)

    resp = api_client.get(BASE)

    assert [row["id"] for row in resp.data["results"]] == [mine.pk]
    assert api_client.get(f"{BASE}{other.pk}/").status_code == status.HTTP_404_NOT_FOUND


def test_post_and_list_messages(api_client, user, carrier):
    conversation = Conversation.objects.create()
    conversation.participants.add(user, carrier)
    url = f"{BASE}{conversation.pk}/messages/"

    resp = api_client.post(url, {"text": "Loading dock B"}, format="json")
    assert resp.status_code == status.HTTP_201_CREATED
    assert resp.data["conversationId"] == str(conversation.pk)
    assert resp.data["sender"]["id"] == str(user.pk)

    resp = api_client.get(url)
    assert resp.status_code == status.HTTP_200_OK
    assert [row["text"] for row in resp.data["results"]] == ["Loading dock B"]


def test_post_empty_message(api_client, user, carrier):
    conversation = Conversation.objects.create()
    conversation.participants.add(user, carrier)
    resp = api_client.post(
        f"{BASE}{conversation.pk}/messages/",
        {"text": "   "},
        format="json",
    )
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert not Message.objects.exists()


def test_outsider_cannot_post(api_client, carrier, admin_user):
    conversation = Conversation.objects.create()
    conversation.participants.add(carrier, admin_user)
    resp = api_client.post(
        f"{BASE}{conversation.pk}/messages/",
        {"text": "hi"},
        format="json",
    )
    assert resp.status_code == status.HTTP_404_NOT_FOUND
