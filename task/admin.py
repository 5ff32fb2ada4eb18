from django.contrib import admin
from task.models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "workspace", "project", "status", "priority", "assigned_to", "progress", "due_date")
    list_filter = ("status", "priority", "workspace")
    search_fields = ("title", "description", "assigned_to__email", "project__name")
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("created_by", "assigned_to", "project")
