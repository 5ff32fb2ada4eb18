from django.contrib import admin
from django.utils.html import format_html
from workspace.models import Workspace, WorkspaceRole, WorkspaceMember


class WorkspaceMemberInline(admin.TabularInline):
    model = WorkspaceMember
    extra = 0
    fields = ('user', 'role', 'status', 'is_active', 'joined_at')
    readonly_fields = ('joined_at',)


@admin.register(Workspace)
class WorkspaceAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'owner', 'avatar_preview', 'is_active', 'created_at', 'updated_at')
    search_fields = ('id', 'name', 'owner__email')
    list_filter = ('is_active', 'created_at')
    readonly_fields = ('created_at', 'updated_at', 'avatar_preview')
    inlines = [WorkspaceMemberInline]

    @admin.display(description="Avatar")
    def avatar_preview(self, obj):
        if obj.avatar_image:
            return format_html(
                '<img src="{}" width="40" height="40" style="border-radius:50%;" />',
                obj.avatar_image.url
            )
        return format_html(
            '<span style="display:inline-block; width:40px; height:40px; line-height:40px; '
            'text-align:center; border-radius:8px; background:{};">{}</span>',
            obj.avatar_background or "#ffffff",
            obj.avatar_emoji,
        )


@admin.register(WorkspaceRole)
class WorkspaceRoleAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'workspace')
    search_fields = ('id', 'name', 'workspace__name')
    list_filter = ('workspace',)


@admin.register(WorkspaceMember)
class WorkspaceMemberAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'workspace', 'role', 'status', 'is_active', 'joined_at')
    search_fields = ('id', 'user__email', 'workspace__name', 'role__name')
    list_filter = ('workspace', 'role__name', 'is_active')
    readonly_fields = ('joined_at',)
