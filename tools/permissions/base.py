from typing import Optional

from rest_framework.permissions import BasePermission

from workspace.models import Workspace, WorkspaceMember
from project.models import Project, ProjectMember
from task.models import Task
from tools.permissions.constants import DEFAULT_ALWAYS_ALLOWED_PERMISSIONS


def get_active_member(user, workspace) -> Optional[WorkspaceMember]:
    """
    Returns the active membership of `user` in `workspace`, or None.

    Only memberships with `is_active=True` count; a deactivated member loses
    every permission in the workspace.
    """

    if not user or not user.is_authenticated:
        return None

    return (
        WorkspaceMember.objects
        .select_related("role")
        .filter(user=user, workspace=workspace, is_active=True)
        .first()
    )


def get_role_settings(member: Optional[WorkspaceMember]) -> dict:
    if member is None or member.role is None:
        return {}
    return member.role.settings or {}


def has_workspace_permission(user, workspace, permission: str) -> bool:
    """
    Resolves a single permission flag for `user` inside `workspace`.

    The owner is always allowed. Other users must be active members; flags in
    DEFAULT_ALWAYS_ALLOWED_PERMISSIONS are granted to every active member, the
    rest are read from the member's role settings.
    """

    if workspace.owner_id == user.id:
        return True

    member = get_active_member(user, workspace)
    if member is None:
        return False

    if permission in DEFAULT_ALWAYS_ALLOWED_PERMISSIONS:
        return True

    return bool(get_role_settings(member).get(permission, False))


def _resolve_required_permission(view, request, attribute: str, method_map: dict) -> Optional[str]:
    required = getattr(view, attribute, None)

    # A view may declare a per-method mapping, e.g. {"GET": ..., "PUT": ...}.
    if isinstance(required, dict):
        required = required.get(request.method)

    return required or method_map.get(request.method)


def _lookup_id(request, view, kwarg: str, field: str):
    value = view.kwargs.get(kwarg)
    if value:
        return value

    data = getattr(request, "data", None)
    if hasattr(data, "get"):
        value = data.get(field)
        if value:
            return value

    return request.query_params.get(field)


class HasWorkspacePermission(BasePermission):
    METHOD_PERMISSION_MAP = {
        "GET": "can_view_workspace",
        "PUT": "can_edit_workspace",
        "PATCH": "can_edit_workspace",
        "DELETE": "can_delete_workspace",
    }

    def has_permission(self, request, view):
        workspace_id = _lookup_id(request, view, "workspace_id", "workspace")
        if not workspace_id:
            return False

        try:
            workspace = Workspace.objects.get(id=workspace_id)
        except (Workspace.DoesNotExist, ValueError, TypeError):
            return False

        if workspace.owner == request.user:
            return True

        required_permission = _resolve_required_permission(
            view, request, "required_workspace_permission", self.METHOD_PERMISSION_MAP
        )
        if not required_permission:
            return False

        return has_workspace_permission(request.user, workspace, required_permission)


class HasProjectPermission(BasePermission):
    METHOD_PERMISSION_MAP = {
        "GET": "can_view_project",
        "PUT": "can_edit_projects",
        "PATCH": "can_edit_projects",
    }

    def has_permission(self, request, view):
        project_id = _lookup_id(request, view, "project_id", "project")
        if not project_id:
            return False

        try:
            project = Project.objects.select_related("workspace").get(id=project_id)
        except (Project.DoesNotExist, ValueError, TypeError):
            return False

        if project.owner_id == request.user.id:
            return True

        workspace = project.workspace

        if workspace.owner_id == request.user.id:
            return True

        workspace_member = get_active_member(request.user, workspace)
        if workspace_member is None:
            return False

        required_permission = _resolve_required_permission(
            view, request, "required_project_permission", self.METHOD_PERMISSION_MAP
        )
        if not required_permission:
            return False

        role_settings = get_role_settings(workspace_member)

        if required_permission == "can_view_project":
            is_project_member = ProjectMember.objects.filter(
                project=project, user=request.user, is_active=True
            ).exists()
            return is_project_member or (
                project.is_public and role_settings.get("can_view_public_projects", False)
            )

        return bool(role_settings.get(required_permission, False))


class HasTaskPermission(BasePermission):
    """
    Permission check for endpoints addressing a single task by `task_id`.

    The flag is resolved in the task's workspace. When the view sets
    `allow_assignee = True`, the task's assignee passes as well, which lets
    members move their own cards on the board without `can_edit_tasks`.
    """

    METHOD_PERMISSION_MAP = {
        "GET": "can_view_tasks",
        "PUT": "can_edit_tasks",
        "PATCH": "can_edit_tasks",
        "DELETE": "can_delete_tasks",
    }

    def has_permission(self, request, view):
        task_id = view.kwargs.get("task_id")
        if not task_id:
            return False

        try:
            task = Task.objects.select_related("workspace").get(id=task_id)
        except Task.DoesNotExist:
            return False

        required_permission = _resolve_required_permission(
            view, request, "required_task_permission", self.METHOD_PERMISSION_MAP
        )
        if not required_permission:
            return False

        if has_workspace_permission(request.user, task.workspace, required_permission):
            return True

        if getattr(view, "allow_assignee", False) and task.assigned_to_id == request.user.id:
            return get_active_member(request.user, task.workspace) is not None

        return False
