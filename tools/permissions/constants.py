"""
Permission names shared by the permission classes.

Flags listed in DEFAULT_ALWAYS_ALLOWED_PERMISSIONS are granted to every active
workspace member regardless of the role settings.
"""

DEFAULT_ALWAYS_ALLOWED_PERMISSIONS = (
    "can_view_workspace",
    "can_view_project",
    "can_view_tasks",
)

# Never present in role settings, so only the owner passes a check that requires it.
OWNER_ONLY_PERMISSION = "owner_member"
