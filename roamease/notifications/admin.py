from django.contrib import admin

from roamease.notifications import models


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "recipient", "title", "notification_type", "priority", "status"]
    search_fields = ["title", "message", "notification_type"]
    list_filter = ["notification_type", "priority", "status", "created_at"]
