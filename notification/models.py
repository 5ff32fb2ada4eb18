from django.db import models

from accounts.models import User


class Notification(models.Model):
    """
    A message shown in a user's notification panel.

    Notifications may point at the workspace and task they are about; both
    links are optional and cleared when the target is deleted.
    """

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="notifications", verbose_name="User")
    message = models.CharField(max_length=500, verbose_name="Message")
    workspace = models.ForeignKey(
        "workspace.Workspace",
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="Workspace",
        null=True,
        blank=True,
    )
    task = models.ForeignKey(
        "task.Task",
        on_delete=models.SET_NULL,
        related_name="notifications",
        verbose_name="Task",
        null=True,
        blank=True,
    )
    is_read = models.BooleanField(default=False, verbose_name="Is Read")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Date of create")

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"

    def __str__(self) -> str:
        return f"{self.user.email}: {self.message[:50]}"
