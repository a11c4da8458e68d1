from django.conf import settings
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from roamease.chat.api.views import ConversationViewSet
from roamease.notifications.api.views import NotificationViewSet
from roamease.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)
router.register("notifications", NotificationViewSet, basename="notifications")
router.register("conversations", ConversationViewSet, basename="conversations")


app_name = "api"
urlpatterns = router.urls
