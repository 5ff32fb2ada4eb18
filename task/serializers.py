from rest_framework import serializers

from accounts.models import User
from accounts.serializers import UserShortSerializer
from task.models import Task
from tools.permissions.base import get_active_member


class TaskSerializer(serializers.ModelSerializer):
    """
    Task card representation, also used for create and partial update.

    `workspace` can only be set on create. `created_by` is always the caller.
    """

    created_by = serializers.ReadOnlyField(source='created_by.id')
    created_by_info = UserShortSerializer(source='created_by', read_only=True)
    assigned_to = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(), required=False, allow_null=True
    )
    assigned_to_info = UserShortSerializer(source='assigned_to', read_only=True)
    project_name = serializers.CharField(source='project.name', read_only=True, default=None)
    is_overdue = serializers.SerializerMethodField()

    class Meta:
        model = Task
        fields = [
            'id',
            'workspace',
            'project',
            'project_name',
            'title',
            'description',
            'status',
            'priority',
            'created_by',
            'created_by_info',
            'assigned_to',
            'assigned_to_info',
            'estimated_time_minutes',
            'start_date',
            'due_date',
            'progress',
            'is_overdue',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def get_is_overdue(self, obj) -> bool:
        return obj.is_overdue()

    def validate_title(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Task title is required.")
        return value

    def validate_workspace(self, value):
        if self.instance is not None and value != self.instance.workspace:
            raise serializers.ValidationError("A task cannot be moved to another workspace.")
        if not value.is_active:
            raise serializers.ValidationError("Workspace is not active.")
        return value

    def validate(self, data):
        workspace = data.get('workspace') or getattr(self.instance, 'workspace', None)
        if workspace is None:
            raise serializers.ValidationError({"workspace": "This field is required."})

        project = data.get('project')
        if project is not None:
            if project.workspace_id != workspace.id:
                raise serializers.ValidationError({"project": "Project does not belong to the task's workspace."})
            if not project.is_active and (self.instance is None or self.instance.project_id != project.id):
                raise serializers.ValidationError({"project": "Project is archived."})

        assignee = data.get('assigned_to')
        if assignee is not None and get_active_member(assignee, workspace) is None:
            raise serializers.ValidationError({"assigned_to": "Assignee must be an active member of the workspace."})

        start_date = data.get('start_date', getattr(self.instance, 'start_date', None))
        due_date = data.get('due_date', getattr(self.instance, 'due_date', None))
        if start_date and due_date and start_date > due_date:
            raise serializers.ValidationError({"due_date": "Due date cannot be earlier than the start date."})

        return data


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Task.Status.choices)


class BoardColumnSerializer(serializers.Serializer):
    status = serializers.CharField()
    count = serializers.IntegerField()
    tasks = TaskSerializer(many=True)
