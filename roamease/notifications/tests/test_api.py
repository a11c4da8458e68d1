import pytest
from rest_framework import status
from rest_framework.test import APIClient

from roamease.notifications.models import Notification
from roamease.notifications.services import create_notification
from roamease.notifications.types import NotificationType
from roamease.notifications.types import RelatedEntityType
from roamease.notifications.types import Status

pytestmark = pytest.mark.django_db

BASE = "/api/v1/notifications/"


@pytest.fixture
def notifications(user, carrier):
    mine = [
        create_notification(
            user,
            NotificationType.BID_RECEIVED,
            f"Bid {i}",
            related_entity=(RelatedEntityType.BID, i),
        )
        for i in range(3)
    ]
    theirs = create_notification(carrier, NotificationType.BID_ACCEPTED, "Yours")
    return mine, theirs


def test_requires_authentication():
    resp = APIClient().get(BASE)
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_only_own_notifications(api_client, notifications):
    mine, theirs = notifications
    resp = api_client.get(BASE)
    assert resp.status_code == status.HTTP_200_OK
    ids = {row["id"] for row in resp.data["results"]}
    assert ids == {n.pk for n in mine}
    assert theirs.pk not in ids
    row = resp.data["results"][0]
    assert row["unread"] is True
    assert row["related_entity"]["type"] == "bid"


def test_unread_count_and_mark_read(api_client, notifications):
    mine, _ = notifications
    resp = api_client.get(f"{BASE}unread-count/")
    assert resp.data == {"unread_count": 3}

    resp = api_client.post(f"{BASE}{mine[0].pk}/mark-read/")
    assert resp.status_code == status.HTTP_204_NO_CONTENT
    mine[0].refresh_from_db()
    assert mine[0].status == Status.READ
    assert mine[0].read_at is not None

    resp = api_client.get(f"{BASE}unread-count/")
    assert resp.data == {"unread_count": 2}


def test_mark_all_read_leaves_others_untouched(api_client, notifications):
    _, theirs = notifications
    resp = api_client.post(f"{BASE}mark-all-read/")
    assert resp.status_code == status.HTTP_204_NO_CONTENT
    assert not Notification.objects.filter(recipient__username="shipper").unread().exists()
    theirs.refresh_from_db()
    assert theirs.status == Status.UNREAD


def test_status_filter_and_archive(api_client, notifications):
    mine, _ = notifications
    api_client.post(f"{BASE}{mine[1].pk}/archive/")
    resp = api_client.get(BASE, {"status": "archived"})
    assert [row["id"] for row in resp.data["results"]] == [mine[1].pk]


def test_cannot_touch_other_users_notification(api_client, notifications):
    _, theirs = notifications
    assert api_client.post(f"{BASE}{theirs.pk}/mark-read/").status_code == 404  # noqa: PLR2004
    assert api_client.delete(f"{BASE}{theirs.pk}/").status_code == 404  # noqa: PLR2004
    assert Notification.objects.filter(pk=theirs.pk).exists()


def test_delete_own_notification(api_client, notifications):
    mine, _ = notifications
    resp = api_client.delete(f"{BASE}{mine[0].pk}/")
    assert resp.status_code == status.HTTP_204_NO_CONTENT
    assert not Notification.objects.filter(pk=mine[0].pk).exists()
