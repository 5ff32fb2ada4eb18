import logging
from datetime import datetime
from typing import Iterable, Optional

from django.utils import timezone

from notification.models import Notification

logger = logging.getLogger(__name__)


def notify(user, message: str, workspace=None, task=None) -> Optional[Notification]:
    """
    Creates a notification for `user`.

    Inactive accounts (pending invites) are skipped and None is returned.
    """

    if user is None or not user.is_active:
        return None

    notification = Notification.objects.create(
        user=user,
        message=message[:500],
        workspace=workspace,
        task=task,
    )
    logger.debug("Notification %s created for user %s", notification.id, user.id)
    return notification


def notify_many(users: Iterable, message: str, workspace=None, task=None, exclude=None) -> list:
    """
    Notifies each distinct user once, skipping `exclude` (usually the actor).
    """

    seen = set()
    created = []
    for user in users:
        if user is None or user.id in seen:
            continue
        if exclude is not None and user.id == exclude.id:
            continue
        seen.add(user.id)
        notification = notify(user, message, workspace=workspace, task=task)
        if notification:
            created.append(notification)
    return created


def unread_count(user, workspace=None) -> int:
    queryset = Notification.objects.filter(user=user, is_read=False)
    if workspace is not None:
        queryset = queryset.filter(workspace=workspace)
    return queryset.count()


def mark_all_read(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)


def relative_time(created_at: datetime, now: Optional[datetime] = None) -> str:
    """
    Human readable age used by the notification panel.

    "N day(s) ago" from one day on, "N hour(s) ago" from one hour on,
    otherwise "Just now".
    """

    now = now or timezone.now()
    diff_hours = int((now - created_at).total_seconds() // 3600)
    diff_days = diff_hours // 24

    if diff_days > 0:
        return f"{diff_days} day{'s' if diff_days > 1 else ''} ago"
    if diff_hours > 0:
        return f"{diff_hours} hour{'s' if diff_hours > 1 else ''} ago"
    return "Just now"
