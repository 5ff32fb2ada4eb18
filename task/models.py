from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from accounts.models import User
from workspace.models import Workspace
from project.models import Project


class Task(models.Model):
    """
    A unit of work on the workspace task board.

    Tasks always belong to a workspace and optionally to one of its projects.
    The board groups tasks into one column per `Status`; moving a card updates
    `status` only (last write wins).

    Fields:
        workspace (Workspace): Workspace the task belongs to.
        project (Project): Optional project inside the same workspace.
        created_by (User): Author of the task.
        assigned_to (User): Optional assignee, an active workspace member.
        title (str): Short summary shown on the card.
        description (str): Optional details.
        status (str): Board column, see `Status`.
        priority (str): See `Priority`.
        estimated_time_minutes (int): Optional estimate.
        start_date (date): Optional planned start.
        due_date (date): Optional deadline; tasks past it and not completed are overdue.
        progress (int): Completion percentage, 0..100.
    """

    class Status(models.TextChoices):
        TODO = 'To Do', 'To Do'
        IN_PROGRESS = 'In Progress', 'In Progress'
        IN_REVIEW = 'In Review', 'In Review'
        COMPLETED = 'Completed', 'Completed'

    class Priority(models.TextChoices):
        LOW = 'Low', 'Low'
        MEDIUM = 'Medium', 'Medium'
        HIGH = 'High', 'High'
        CRITICAL = 'Critical', 'Critical'

    workspace = models.ForeignKey(Workspace, on_delete=models.CASCADE, related_name="tasks", verbose_name="Workspace")
    project = models.ForeignKey(
        Project,
        on_delete=models.SET_NULL,
        related_name="tasks",
        verbose_name="Project",
        null=True,
        blank=True
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="created_tasks",
        verbose_name="Created by",
        null=True,
    )
    assigned_to = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="assigned_tasks",
        verbose_name="Assigned to",
        null=True,
        blank=True
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    description = models.TextField(verbose_name="Description", blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.TODO, verbose_name="Status")
    priority = models.CharField(max_length=20, choices=Priority.choices, default=Priority.MEDIUM, verbose_name="Priority")
    estimated_time_minutes = models.PositiveIntegerField(verbose_name="Estimated time (minutes)", null=True, blank=True)
    start_date = models.DateField(verbose_name="Start date", null=True, blank=True)
    due_date = models.DateField(verbose_name="Due date", null=True, blank=True)
    progress = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name="Progress"
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Date of create")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Date of update")

    # Board column order.
    BOARD_COLUMNS = [Status.TODO.value, Status.IN_PROGRESS.value, Status.IN_REVIEW.value, Status.COMPLETED.value]

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Task"
        verbose_name_plural = "Tasks"
        indexes = [
            models.Index(fields=["workspace", "status"], name="task_workspace_status_idx"),
            models.Index(fields=["assigned_to", "status"], name="task_assignee_status_idx"),
        ]

    @property
    def is_completed(self) -> bool:
        return self.status == self.Status.COMPLETED

    def is_overdue(self, today=None) -> bool:
        if self.is_completed or self.due_date is None:
            return False
        today = today or timezone.localdate()
        return self.due_date < today

    def __str__(self) -> str:
        return self.title
