from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from roamease.users.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["username", "email", "name", "role", "is_online", "last_seen"]
    list_filter = ["role", "is_online", "is_staff", "is_active"]
    search_fields = ["username", "email", "name"]
    fieldsets = (
        *BaseUserAdmin.fieldsets,
        ("Marketplace", {"fields": ("role", "is_online", "last_seen")}),
    )
    readonly_fields = ["is_online", "last_seen"]
