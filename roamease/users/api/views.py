from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from roamease.realtime.emitter import RealtimeNotInitializedError
from roamease.realtime.socketio import get_gateway
from roamease.users.models import User

from .serializers import OnlineUsersSerializer
from .serializers import UserSerializer


@extend_schema_view(
    list=extend_schema(tags=["Users"]),
    retrieve=extend_schema(tags=["Users"]),
)
class UserViewSet(RetrieveModelMixin, ListModelMixin, GenericViewSet):
    serializer_class = UserSerializer
    queryset = User.objects.all()
    lookup_field = "username"
    pagination_class = None

    def get_queryset(self, *args, **kwargs):  # type: ignore[override]
        user = self.request.user
        # Admins may list everybody; others only see themselves
        if getattr(user, "is_admin_role", False) or user.is_staff:
            return User.objects.all()
        return User.objects.filter(pk=user.pk)

    @extend_schema(tags=["Users"])
    @action(detail=False)
    def me(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return Response(status=status.HTTP_200_OK, data=serializer.data)

    @extend_schema(tags=["Users"], responses=OnlineUsersSerializer)
    @action(detail=False)
    def online(self, request):
        """Snapshot of the users currently online in this process."""

        try:
            registry = get_gateway().registry
        except RealtimeNotInitializedError:
            return Response(
                {"detail": "Realtime server is not running."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        data = {"user_ids": sorted(registry.online_user_ids())}
        return Response(OnlineUsersSerializer(data).data)
