import pytest
from rest_framework.test import APIClient

from roamease.users.models import User

PASSWORD = "RoamPass!123"  # noqa: S105


@pytest.fixture
def user(db) -> User:
    return User.objects.create_user(
        username="shipper",
        email="shipper@example.com",
        password=PASSWORD,
        first_name="Sam",
        last_name="Shipper",
    )


@pytest.fixture
def carrier(db) -> User:
    return User.objects.create_user(
        username="carrier",
        email="carrier@example.com",
        password=PASSWORD,
        role=User.Role.LOGISTICS,
        first_name="Cara",
        last_name="Carrier",
    )


@pytest.fixture
def admin_user(db) -> User:
    return User.objects.create_user(
        username="ops",
        email="ops@example.com",
        password=PASSWORD,
        role=User.Role.ADMIN,
    )


@pytest.fixture
def api_client(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client
