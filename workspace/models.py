from django.db import models

from accounts.models import User
from workspace.constants import DEFAULT_ROLES, ROLE_ADMIN
from tools.validators import validate_hex_color
from tools.permissions.defaults import DEFAULT_ROLE_PERMISSIONS


class Workspace(models.Model):
    """
    Top-level tenant: groups projects, tasks and members.

    A workspace has an owner and any number of members, each holding one of the
    workspace's roles. On creation the default roles ("admin", "user", "client")
    are generated with the permission flags from DEFAULT_ROLE_PERMISSIONS.

    Fields:
        name (str): Name of the workspace.
        description (str): Optional text description of the workspace.
        avatar_background (str): HEX color code for the background of the avatar.
        avatar_emoji (str): Emoji used as a visual avatar for the workspace.
        avatar_image (ImageField): Optional image representing the workspace.
        created_at (datetime): Timestamp when the workspace was created.
        updated_at (datetime): Timestamp when the workspace was last updated.
        owner (User): The user who owns the workspace.
        is_active (bool): Indicates whether the workspace is currently active.
    """

    name = models.CharField(max_length=255, verbose_name="Name")
    description = models.TextField(verbose_name="Description", blank=True, null=True)
    avatar_background = models.CharField(
        max_length=7,
        verbose_name="Avatar Background",
        default="#ffffff",
        validators=[validate_hex_color],
        null=True,
        blank=True
    )
    avatar_emoji = models.CharField(max_length=3, verbose_name="Avatar Emoji", default="🚀")
    avatar_image = models.ImageField(
        upload_to="workspaces/",
        verbose_name="Avatar Image",
        null=True,
        blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Date of create")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Date of update")
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="owned_workspaces", verbose_name="Owner")
    is_active = models.BooleanField(default=True, verbose_name="Is Active")

    class Meta:
        verbose_name = "Workspace"
        verbose_name_plural = "Workspaces"

    def save(self, *args, **kwargs) -> None:
        """
        Saves the workspace and, on first save, creates its default roles.
        """

        is_new = self.pk is None
        super().save(*args, **kwargs)

        if is_new:
            self.create_default_roles()

    def create_default_roles(self) -> None:
        WorkspaceRole.objects.bulk_create([
            WorkspaceRole(
                name=role["name"],
                description=role["description"],
                workspace=self,
                settings=dict(DEFAULT_ROLE_PERMISSIONS.get(role["name"], {})),
            )
            for role in DEFAULT_ROLES
        ])

    @property
    def admin_role(self) -> 'WorkspaceRole | None':
        return self.roles.filter(name=ROLE_ADMIN["name"]).first()

    def __str__(self) -> str:
        return self.name


class WorkspaceRole(models.Model):
    """
    A role inside one workspace ("admin", "user", "client", or custom).

    `settings` stores the permission flags, e.g.
    {"can_create_tasks": true, "can_delete_tasks": false}.
    """

    name = models.CharField(max_length=50, verbose_name="Role name")
    description = models.TextField(verbose_name="Description", blank=True, null=True)
    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name="roles", verbose_name="Workspace")
    settings = models.JSONField(default=dict, blank=True, verbose_name="Role Settings")

    class Meta:
        unique_together = ('workspace', 'name')
        verbose_name = "Workspace Role"
        verbose_name_plural = "Workspace Roles"

    def __str__(self) -> str:
        return f"{self.name} ({self.workspace.name})"


class WorkspaceMember(models.Model):
    """
    Links a user to a workspace with a role.

    A user can be added to a workspace only once; removing someone from the
    team deactivates the membership instead of deleting it.

    Fields:
        user (User): The member.
        workspace (Workspace): The workspace.
        role (WorkspaceRole): The member's role; permission flags come from it.
        status (str): active, invited, pending or suspended.
        joined_at (datetime): When the user was added.
        is_active (bool): Inactive members keep their history but lose access.
    """

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        INVITED = 'invited', 'Invited'
        PENDING = 'pending', 'Pending'
        SUSPENDED = 'suspended', 'Suspended'

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="workspace_memberships", verbose_name="User")
    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name="members", verbose_name="Workspace")
    role = models.ForeignKey(WorkspaceRole, on_delete=models.SET_NULL, related_name="members", verbose_name="Role", null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE, verbose_name="Status")
    joined_at = models.DateTimeField(auto_now_add=True, verbose_name="Date of joined")
    is_active = models.BooleanField(default=True, verbose_name="Is Active")

    class Meta:
        unique_together = ('user', 'workspace')
        verbose_name = "Workspace Member"
        verbose_name_plural = "Workspace Members"

    def __str__(self) -> str:
        role_name = self.role.name if self.role else 'No Role'
        return f"{self.user.email} in {self.workspace.name} as {role_name}"
