from django.db.models import QuerySet
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from task.models import Task
from tools.query_params import int_param, bool_param


def filter_tasks(queryset: QuerySet, params) -> QuerySet:
    """
    Applies the task list query parameters.

    Supported:
        search: case-insensitive substring of the title.
        status, priority: exact choice values (e.g. "In Progress", "High").
        project: project id, or "none" for tasks without a project.
        assigned_to: user id, or "none" for unassigned tasks.
        overdue: "true" keeps open tasks whose due date has passed.
    """

    search = (params.get("search") or "").strip()
    if search:
        queryset = queryset.filter(title__icontains=search)

    status = params.get("status")
    if status:
        if status not in Task.Status.values:
            raise ValidationError({"status": f"Unknown status '{status}'."})
        queryset = queryset.filter(status=status)

    priority = params.get("priority")
    if priority:
        if priority not in Task.Priority.values:
            raise ValidationError({"priority": f"Unknown priority '{priority}'."})
        queryset = queryset.filter(priority=priority)

    if (params.get("project") or "").lower() == "none":
        queryset = queryset.filter(project__isnull=True)
    else:
        project_id = int_param(params, "project")
        if project_id is not None:
            queryset = queryset.filter(project_id=project_id)

    if (params.get("assigned_to") or "").lower() == "none":
        queryset = queryset.filter(assigned_to__isnull=True)
    else:
        assignee_id = int_param(params, "assigned_to")
        if assignee_id is not None:
            queryset = queryset.filter(assigned_to_id=assignee_id)

    if bool_param(params, "overdue"):
        queryset = queryset.filter(due_date__lt=timezone.localdate()).exclude(status=Task.Status.COMPLETED)

    return queryset
