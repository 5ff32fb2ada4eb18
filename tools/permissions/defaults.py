"""
Default permission flags of the built-in workspace roles.

Every role stores a flat JSON object in `WorkspaceRole.settings`, one boolean per
flag below. Flags a role does not grant are stored as False so the settings can
be edited in place from the admin.

Contents:
    - WORKSPACE_PERMISSIONS, PROJECT_PERMISSIONS, TASK_PERMISSIONS, REPORT_PERMISSIONS:
      the flag names, grouped by what they guard.
    - ALL_PERMISSIONS: every flag, in display order.
    - DEFAULT_ROLE_PERMISSIONS: role name -> {flag: bool}.
"""

WORKSPACE_PERMISSIONS = (
    "can_edit_workspace",
    "can_delete_workspace",
    "can_change_role_in_workspace",
    "can_invite_users_to_workspace",
    "can_deactivate_users_in_workspace",
)

PROJECT_PERMISSIONS = (
    "can_create_projects",
    "can_edit_projects",
    "can_delete_projects",
    "can_view_public_projects",
    "can_invite_users_to_project",
    "can_deactivate_users_in_project",
)

TASK_PERMISSIONS = (
    "can_create_tasks",
    "can_edit_tasks",
    "can_delete_tasks",
)

REPORT_PERMISSIONS = (
    "can_view_reports",
)

ALL_PERMISSIONS = WORKSPACE_PERMISSIONS + PROJECT_PERMISSIONS + TASK_PERMISSIONS + REPORT_PERMISSIONS

_GRANTED = {
    "admin": set(ALL_PERMISSIONS),
    "user": {
        "can_create_projects",
        "can_view_public_projects",
        "can_create_tasks",
        "can_edit_tasks",
        "can_view_reports",
    },
    "client": {
        "can_view_reports",
    },
}


def build_role_permissions(granted) -> dict:
    """
    Expands a set of granted flags into the full settings object.
    """

    return {name: name in granted for name in ALL_PERMISSIONS}


DEFAULT_ROLE_PERMISSIONS = {role: build_role_permissions(granted) for role, granted in _GRANTED.items()}
