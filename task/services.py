"""
Task writes and the notifications they trigger.

Notification fan-out never blocks a task write: failures are logged and the
write is kept.
"""

import logging

from django.db import transaction

from notification.services import notify, notify_many
from task.models import Task

logger = logging.getLogger(__name__)


def _safe_notify(callback, *args, **kwargs) -> None:
    try:
        # Savepoint, so a failed insert does not poison the caller's transaction.
        with transaction.atomic():
            callback(*args, **kwargs)
    except Exception:
        logger.exception("Failed to create task notification")


def _notify_assignment(task: Task, actor) -> None:
    if task.assigned_to_id and task.assigned_to_id != actor.id:
        _safe_notify(
            notify,
            task.assigned_to,
            f"{actor.get_full_name()} assigned you the task \"{task.title}\"",
            workspace=task.workspace,
            task=task,
        )


def _notify_status_change(task: Task, actor, previous_status: str) -> None:
    _safe_notify(
        notify_many,
        [task.assigned_to, task.created_by],
        f"{actor.get_full_name()} moved \"{task.title}\" from {previous_status} to {task.status}",
        workspace=task.workspace,
        task=task,
        exclude=actor,
    )


@transaction.atomic
def create_task(serializer, actor) -> Task:
    task = serializer.save(created_by=actor)
    logger.info("Task %s created in workspace %s by user %s", task.id, task.workspace_id, actor.id)

    _notify_assignment(task, actor)
    return task


@transaction.atomic
def update_task(serializer, actor) -> Task:
    """
    Applies a (partial) update and notifies about a new assignee or a status change.
    """

    previous_assignee_id = serializer.instance.assigned_to_id
    previous_status = serializer.instance.status

    task = serializer.save()

    if task.assigned_to_id != previous_assignee_id:
        _notify_assignment(task, actor)

    if task.status != previous_status:
        logger.info("Task %s status changed %s -> %s by user %s", task.id, previous_status, task.status, actor.id)
        _notify_status_change(task, actor, previous_status)

    return task


def change_status(task: Task, status: str, actor) -> Task:
    """
    Moves a task to another board column.

    A single UPDATE of `status`: concurrent moves overwrite each other, the
    last write wins. Moving to the current status is a no-op.
    """

    previous_status = task.status
    if previous_status == status:
        return task

    task.status = status
    task.save(update_fields=["status", "updated_at"])

    logger.info("Task %s status changed %s -> %s by user %s", task.id, previous_status, status, actor.id)
    _notify_status_change(task, actor, previous_status)
    return task


def delete_task(task: Task, actor) -> None:
    task_id, workspace_id = task.id, task.workspace_id
    task.delete()
    logger.info("Task %s deleted from workspace %s by user %s", task_id, workspace_id, actor.id)
