"""
Workspace operations that touch more than one model.

Views stay thin and call these helpers; each helper runs in a transaction
where it writes more than one row.
"""

import logging
import math
from typing import Optional

from django.db import transaction
from django.db.models import Avg, Count
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from accounts.models import User
from notification.services import notify, unread_count
from project.models import Project
from task.models import Task
from tools.email import send_invite_email
from workspace.models import Workspace, WorkspaceMember, WorkspaceRole
from workspace.constants import ROLE_ADMIN

logger = logging.getLogger(__name__)


@transaction.atomic
def create_workspace(owner: User, **fields) -> Workspace:
    """
    Creates a workspace together with its default roles and makes the owner an admin member.
    """

    workspace = Workspace.objects.create(owner=owner, **fields)

    admin_role = WorkspaceRole.objects.filter(name=ROLE_ADMIN["name"], workspace=workspace).first()
    if not admin_role:
        raise ValueError("Admin role not found in the system.")

    WorkspaceMember.objects.create(
        user=owner,
        workspace=workspace,
        role=admin_role,
        is_active=True,
    )

    logger.info("Workspace %s created by user %s", workspace.id, owner.id)
    return workspace


def add_member(workspace: Workspace, email: str, role: WorkspaceRole, invited_by: User) -> WorkspaceMember:
    """
    Adds `email` to the workspace with `role`.

    Unknown emails get an inactive account and an invite email with a
    set-password link; their membership starts in the `invited` status.
    Existing users are notified in-app.
    """

    user = User.objects.filter(email__iexact=email).first()

    if user and WorkspaceMember.objects.filter(workspace=workspace, user=user).exists():
        raise ValidationError({"email": "User is already a member of this workspace."})

    with transaction.atomic():
        invited = user is None
        if invited:
            user = User.objects.create_invited_user(email)

        member = WorkspaceMember.objects.create(
            user=user,
            workspace=workspace,
            role=role,
            status=WorkspaceMember.Status.INVITED if invited else WorkspaceMember.Status.ACTIVE,
        )

    if invited:
        try:
            send_invite_email(user, workspace)
        except Exception:
            logger.exception("Failed to send invite email to %s", user.email)
    else:
        notify(
            user,
            f"{invited_by.get_full_name()} added you to the workspace {workspace.name}",
            workspace=workspace,
        )

    logger.info("User %s added to workspace %s as %s", user.id, workspace.id, role.name)
    return member


def find_member(workspace: Workspace, user_id: Optional[int] = None, email: Optional[str] = None) -> WorkspaceMember:
    if user_id:
        user = User.objects.filter(id=user_id).first()
    else:
        user = User.objects.filter(email__iexact=email).first()

    if not user:
        raise ValidationError({"detail": "User is not found."})

    member = (
        WorkspaceMember.objects
        .select_related("user", "role")
        .filter(workspace=workspace, user=user)
        .first()
    )
    if not member:
        raise ValidationError({"detail": "User is not member in this workspace."})

    return member


def set_member_active(workspace: Workspace, member: WorkspaceMember, is_active: bool) -> WorkspaceMember:
    """
    Activates or deactivates a membership. The owner's membership cannot be toggled.
    """

    if member.user_id == workspace.owner_id:
        raise ValidationError({"detail": "The workspace owner cannot be deactivated."})

    if member.is_active == is_active:
        state = "activated" if is_active else "deactivated"
        raise ValidationError({"detail": f"User is already {state}."})

    member.is_active = is_active
    member.save(update_fields=["is_active"])

    logger.info("Member %s in workspace %s set active=%s", member.user_id, workspace.id, is_active)
    return member


def change_member_role(workspace: Workspace, member: WorkspaceMember, role_name: str, actor: User) -> WorkspaceMember:
    """
    Gives `member` the workspace role called `role_name`.

    The owner keeps the admin role, deactivated members cannot be changed and
    only the owner may demote another admin.
    """

    role = WorkspaceRole.objects.filter(workspace=workspace, name=role_name).first()
    if not role:
        raise ValidationError({"detail": "Role is not found."})

    if not member.is_active:
        raise ValidationError({"detail": "Cannot change role of a deactivated user."})

    if member.user_id == workspace.owner_id:
        raise ValidationError({"detail": "Cannot change the role of the workspace owner."})

    if member.role is not None and member.role.name == ROLE_ADMIN["name"] and workspace.owner_id != actor.id:
        raise PermissionDenied("Cannot change admin role")

    member.role = role
    member.save(update_fields=["role"])

    logger.info("Member %s role changed to %s in workspace %s", member.user_id, role.name, workspace.id)
    return member


@transaction.atomic
def transfer_ownership(workspace: Workspace, member: WorkspaceMember) -> Workspace:
    """
    Makes `member` the owner of the workspace and gives them the admin role.
    """

    if not member.is_active:
        raise ValidationError({"detail": "Cannot transfer ownership to a deactivated member."})

    admin_role = workspace.admin_role
    if admin_role is None:
        raise ValidationError({"detail": "Admin role not found."})

    member.role = admin_role
    member.save(update_fields=["role"])

    previous_owner_id = workspace.owner_id
    workspace.owner = member.user
    workspace.save(update_fields=["owner", "updated_at"])

    logger.info(
        "Workspace %s ownership transferred from user %s to user %s",
        workspace.id, previous_owner_id, member.user_id,
    )
    return workspace


def get_dashboard(workspace: Workspace, user: User) -> dict:
    """
    Aggregated figures for the workspace overview cards.

    - average_progress: rounded mean progress over all tasks, 0 without tasks.
    - projects_behind_schedule: active projects with at least one task that is
      not completed and whose due date is before today.
    - available_members: active members without any open (non-completed) assigned task.
    """

    today = timezone.localdate()
    tasks = Task.objects.filter(workspace=workspace)

    task_stats = tasks.aggregate(total=Count("id"), average=Avg("progress"))
    total_tasks = task_stats["total"] or 0
    average_progress = math.floor(float(task_stats["average"]) + 0.5) if total_tasks else 0

    projects = Project.objects.filter(workspace=workspace, is_active=True)
    behind_count = (
        tasks.filter(project__in=projects, due_date__lt=today)
        .exclude(status=Task.Status.COMPLETED)
        .order_by()
        .values("project_id")
        .distinct()
        .count()
    )

    members = WorkspaceMember.objects.filter(workspace=workspace, is_active=True)
    busy_user_ids = (
        tasks.exclude(status=Task.Status.COMPLETED)
        .filter(assigned_to__isnull=False)
        .values("assigned_to_id")
    )
    team_members = members.count()
    available_members = members.exclude(user_id__in=busy_user_ids).count()

    return {
        "total_tasks": total_tasks,
        "average_progress": average_progress,
        "active_projects": projects.count(),
        "projects_behind_schedule": behind_count,
        "team_members": team_members,
        "available_members": available_members,
        "unread_notifications": unread_count(user),
    }
