"""
Built-in workspace roles.

Each role is created for every new workspace (see `Workspace.create_default_roles`)
with the flags from `tools.permissions.defaults.DEFAULT_ROLE_PERMISSIONS`.
"""

ROLE_ADMIN = {"name": "admin", "description": "Full control over the workspace, its projects and tasks"}
ROLE_USER = {"name": "user", "description": "Team member: creates projects and works on tasks"}
ROLE_CLIENT = {"name": "client", "description": "External collaborator with read-only access"}

DEFAULT_ROLES = [ROLE_ADMIN, ROLE_USER, ROLE_CLIENT]
DEFAULT_MEMBER_ROLE = ROLE_USER["name"]
