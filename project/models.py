from django.db import models

from accounts.models import User
from workspace.models import Workspace
from tools.validators import validate_hex_color, validate_project_key


class Project(models.Model):
    """
    Represents a project within a specific workspace.

    A project groups tasks. It can be public (visible to every workspace member
    whose role allows `can_view_public_projects`) or private (project members
    only), and active or archived.

    Fields:
        name (str): The human-readable name of the project.
        key (str): Short identifier unique inside the workspace (e.g. "WEB").
        description (str): Optional detailed description of the project.
        workspace (Workspace): The workspace to which the project belongs.
        owner (User): The user responsible for the project.
        is_public (bool): Indicates whether the project is visible to all workspace members.
        is_active (bool): False once the project is archived.
        avatar_background (str): HEX color code for the avatar background.
        avatar_emoji (str): Emoji used as a symbolic avatar for the project.
        avatar_image (Image): Optional image used as the project's avatar.
        created_at (datetime): Timestamp when the project was created.
        updated_at (datetime): Timestamp when the project was last updated.
    """

    name = models.CharField(verbose_name="Name", max_length=150)
    key = models.CharField(verbose_name="Key", max_length=10, validators=[validate_project_key])
    description = models.TextField(verbose_name="Description", blank=True, null=True)
    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name="projects", verbose_name="Workspace")
    owner = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="owned_projects",
        verbose_name="Owner",
        null=True,
        blank=True
    )
    is_public = models.BooleanField(default=True, verbose_name="Is Public")
    is_active = models.BooleanField(default=True, verbose_name="Is Active")
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
        upload_to="project/",
        verbose_name="Avatar Image",
        null=True,
        blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Date of create")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Date of update")

    class Meta:
        unique_together = ('workspace', 'key')
        verbose_name = "Project"
        verbose_name_plural = "Projects"

    def save(self, *args, **kwargs) -> None:
        if self.key:
            self.key = self.key.upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.key


class ProjectMember(models.Model):
    """
    Represents a user's membership in a specific project.

    One user can be part of many projects, but only once per project.
    """

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="project_memberships", verbose_name="User")
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="members", verbose_name="Project")
    is_active = models.BooleanField(default=True, verbose_name="Is Active")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Date of create")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Date of update")

    class Meta:
        unique_together = ('user', 'project')
        verbose_name = "Project Member"
        verbose_name_plural = "Project Members"

    def __str__(self) -> str:
        return f"{self.user.email} in {self.project.name}"
