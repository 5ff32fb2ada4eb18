from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from task.models import Task
from task.filters import filter_tasks
from task.serializers import TaskSerializer, TaskStatusSerializer, BoardColumnSerializer
from task import services
from tools.permissions.base import HasWorkspacePermission, HasTaskPermission
from tools.query_params import int_param


def task_queryset():
    return Task.objects.select_related("project", "created_by", "assigned_to", "workspace")


class TaskCreateAPIView(generics.CreateAPIView):
    """
    Creates a task in the workspace given in the body (`workspace`).

    Requires `can_create_tasks`. Defaults: status "To Do", priority "Medium",
    progress 0. The assignee, when given, is notified.
    """

    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_create_tasks"

    def perform_create(self, serializer):
        services.create_task(serializer, self.request.user)


class WorkspaceTaskListAPIView(generics.ListAPIView):
    """
    Tasks of a workspace, newest first. See `task.filters.filter_tasks` for the query parameters.
    """

    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_view_tasks"

    def get_queryset(self):
        queryset = task_queryset().filter(workspace_id=self.kwargs["workspace_id"])
        return filter_tasks(queryset, self.request.query_params).order_by("-created_at", "-id")


class TaskBoardAPIView(APIView):
    """
    Kanban view of a workspace: one column per status, always in the order
    To Do, In Progress, In Review, Completed. Empty columns are included.

    Accepts the same filters as the task list (a `status` filter leaves the
    other columns empty).
    """

    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_view_tasks"

    def get(self, request, workspace_id: int) -> Response:
        queryset = filter_tasks(
            task_queryset().filter(workspace_id=workspace_id),
            request.query_params,
        ).order_by("-created_at", "-id")

        columns = {column: [] for column in Task.BOARD_COLUMNS}
        for task in queryset:
            columns[task.status].append(task)

        data = [
            {"status": column, "count": len(tasks), "tasks": tasks}
            for column, tasks in columns.items()
        ]

        return Response(
            {"workspace": int(workspace_id), "columns": BoardColumnSerializer(data, many=True).data},
            status=status.HTTP_200_OK
        )


class MyTaskListAPIView(generics.ListAPIView):
    """
    Tasks assigned to the caller in workspaces where they are an active member.
    Accepts the task list filters.
    """

    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        user = self.request.user
        queryset = task_queryset().filter(
            assigned_to=user,
            workspace__members__user=user,
            workspace__members__is_active=True,
        )

        workspace_id = int_param(self.request.query_params, "workspace")
        if workspace_id is not None:
            queryset = queryset.filter(workspace_id=workspace_id)

        return filter_tasks(queryset, self.request.query_params).order_by("due_date", "-created_at", "-id")


class TaskDetailAPIView(APIView):
    """
    GET any active workspace member, PUT (partial) needs `can_edit_tasks`,
    DELETE needs `can_delete_tasks`.
    """

    permission_classes = [permissions.IsAuthenticated, HasTaskPermission]

    def get(self, request, task_id: int) -> Response:
        task = get_object_or_404(task_queryset(), id=task_id)
        return Response(TaskSerializer(task).data, status=status.HTTP_200_OK)

    def put(self, request, task_id: int) -> Response:
        task = get_object_or_404(task_queryset(), id=task_id)
        serializer = TaskSerializer(task, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        task = services.update_task(serializer, request.user)
        return Response(TaskSerializer(task).data, status=status.HTTP_200_OK)

    def delete(self, request, task_id: int) -> Response:
        task = get_object_or_404(Task, id=task_id)
        services.delete_task(task, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TaskStatusAPIView(APIView):
    """
    Moves a task to another board column (drag and drop).

    Request body: {"status": "In Review"}

    Allowed with `can_edit_tasks` or for the task's assignee. The update is a
    plain overwrite; the client refetches the board afterwards.
    """

    permission_classes = [permissions.IsAuthenticated, HasTaskPermission]
    required_task_permission = "can_edit_tasks"
    allow_assignee = True

    def patch(self, request, task_id: int) -> Response:
        task = get_object_or_404(task_queryset(), id=task_id)

        serializer = TaskStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = services.change_status(task, serializer.validated_data["status"], request.user)
        return Response(TaskSerializer(task).data, status=status.HTTP_200_OK)
