from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.html import format_html

from accounts.models import User
from workspace.models import WorkspaceMember


class WorkspaceMembershipInline(admin.TabularInline):
    model = WorkspaceMember
    fk_name = "user"
    extra = 0
    fields = ("workspace", "role", "status", "is_active", "joined_at")
    readonly_fields = ("joined_at",)
    verbose_name_plural = "Workspace memberships"


@admin.register(User)
class MainUserAdmin(UserAdmin):
    inlines = [WorkspaceMembershipInline]
    list_display = (
        'id', 'email', 'first_name', 'last_name', 'avatar_preview',
        'avatar_emoji', 'is_staff', 'is_active', 'date_joined'
    )
    list_filter = ('is_staff', 'is_active')

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Personal Info', {'fields': ('first_name', 'last_name', 'bio')}),
        ('Avatar', {'fields': (
            'avatar_background', 'avatar_emoji',
            'avatar_image', 'avatar_preview'
        )}),
        ('Permissions', {'fields': (
            'is_staff', 'is_active', 'is_superuser',
            'groups', 'user_permissions'
        )}),
        ('Important Dates', {'fields': ('last_login',)}),
    )

    readonly_fields = ('avatar_preview',)

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': (
                'email', 'first_name', 'last_name',
                'password1', 'password2', 'is_staff',
                'is_active'
            ),
        }),
    )

    search_fields = ('email', 'first_name', 'last_name')
    ordering = ('email',)

    @admin.display(description="Avatar")
    def avatar_preview(self, obj):
        if obj.avatar_image:
            return format_html(
                '<img src="{}" width="40" height="40" style="border-radius:50%;" />',
                obj.avatar_image.url
            )
        return format_html(
            '<span style="display:inline-block; width:40px; height:40px; line-height:40px; '
            'text-align:center; border-radius:50%; background:{};">{}</span>',
            obj.avatar_background or "#ffffff",
            obj.avatar_emoji or obj.initials,
        )
