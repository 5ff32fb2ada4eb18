"""
Project operations shared by the project views.
"""

import logging
from typing import Optional

from django.db import transaction
from rest_framework.exceptions import ValidationError

from accounts.models import User
from project.models import Project, ProjectMember

logger = logging.getLogger(__name__)


@transaction.atomic
def create_project(serializer, creator: User) -> Project:
    """
    Saves a new project owned by `creator` and makes the creator its first member.
    """

    project = serializer.save(owner=creator)
    ProjectMember.objects.create(user=creator, project=project)

    logger.info("Project %s created in workspace %s by user %s", project.id, project.workspace_id, creator.id)
    return project


def find_project_member(project: Project, user_id: Optional[int] = None, email: Optional[str] = None) -> ProjectMember:
    if user_id:
        user = User.objects.filter(id=user_id).first()
    else:
        user = User.objects.filter(email__iexact=email).first()

    if not user:
        raise ValidationError({"detail": "User is not found."})

    member = ProjectMember.objects.select_related("user").filter(project=project, user=user).first()
    if not member:
        raise ValidationError({"detail": "User is not member in this project."})

    return member


def set_member_active(project: Project, member: ProjectMember, is_active: bool) -> ProjectMember:
    """
    Activates or deactivates a project member. The project owner always stays active.
    """

    if not is_active and member.user_id == project.owner_id:
        raise ValidationError({"detail": "The project owner cannot be deactivated."})

    if member.is_active == is_active:
        state = "activated" if is_active else "deactivated"
        raise ValidationError({"detail": f"User is already {state}."})

    member.is_active = is_active
    member.save(update_fields=["is_active", "updated_at"])

    logger.info("Project member %s in project %s set active=%s", member.user_id, project.id, is_active)
    return member


def set_project_active(project: Project, is_active: bool, actor: User) -> Project:
    if project.is_active == is_active:
        state = "activated" if is_active else "deactivated"
        raise ValidationError({"detail": f"Project is already {state}."})

    project.is_active = is_active
    project.save(update_fields=["is_active", "updated_at"])

    logger.info("Project %s set active=%s by user %s", project.id, is_active, actor.id)
    return project


def transfer_project_ownership(project: Project, new_member_id=None, new_owner_id=None, new_owner_email=None) -> Project:
    """
    Hands the project to one of its active members, picked by member id, user id or email.
    """

    members = ProjectMember.objects.select_related("user").filter(project=project, is_active=True)
    if new_member_id:
        member = members.filter(id=new_member_id).first()
    elif new_owner_email:
        member = members.filter(user__email__iexact=new_owner_email).first()
    else:
        member = members.filter(user_id=new_owner_id).first()

    if member is None:
        raise ValidationError({"detail": "The specified user is not an active member of this project."})

    project.owner = member.user
    project.save(update_fields=["owner", "updated_at"])

    logger.info("Project %s ownership transferred to user %s", project.id, member.user_id)
    return project
