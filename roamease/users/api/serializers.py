from rest_framework import serializers

from roamease.users.models import User


class UserSerializer(serializers.ModelSerializer[User]):
    full_name = serializers.CharField(source="name", read_only=True)
    id = serializers.IntegerField(read_only=True)

    # Presence fields are maintained by the realtime layer only
    is_online = serializers.BooleanField(read_only=True)
    last_seen = serializers.DateTimeField(read_only=True)
    role = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "role",
            "is_online",
            "last_seen",
        ]
        read_only_fields = ["username", "email"]


class OnlineUsersSerializer(serializers.Serializer):
    user_ids = serializers.ListField(child=serializers.CharField())
