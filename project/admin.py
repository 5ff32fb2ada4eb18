from django.contrib import admin
from project.models import Project, ProjectMember


class ProjectMemberInline(admin.TabularInline):
    model = ProjectMember
    extra = 0
    fields = ("user", "is_active", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "key", "workspace", "owner", "is_active", "is_public", "created_at")
    list_filter = ("workspace", "is_public", "is_active")
    search_fields = ("name", "key", "workspace__name")
    readonly_fields = ("created_at", "updated_at")
    inlines = [ProjectMemberInline]


@admin.register(ProjectMember)
class ProjectMemberAdmin(admin.ModelAdmin):
    list_display = ("user", "project", "is_active", "created_at", "updated_at")
    list_filter = ("is_active", "project__workspace")
    search_fields = ("user__email", "project__name")
    readonly_fields = ("created_at", "updated_at")
