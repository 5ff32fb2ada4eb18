from django.contrib import admin
from notification.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "message", "workspace", "task", "is_read", "created_at")
    list_filter = ("is_read", "workspace")
    search_fields = ("user__email", "message")
    readonly_fields = ("created_at",)
