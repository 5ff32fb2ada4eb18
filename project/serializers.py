from rest_framework import serializers

from project.models import Project, ProjectMember
from accounts.serializers import ProfileSerializer
from tools.permissions.base import get_active_member


class ProjectSerializer(serializers.ModelSerializer):
    owner = serializers.ReadOnlyField(source='owner.id')
    task_count = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            'id',
            'name',
            'key',
            'description',
            'owner',
            'workspace',
            'avatar_background',
            'avatar_emoji',
            'avatar_image',
            'is_public',
            'is_active',
            'task_count',
            'created_at',
            'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at', 'owner', 'is_active']
        # (workspace, key) uniqueness is checked in validate() with a readable message.
        validators = []

    def get_task_count(self, obj) -> int:
        return obj.tasks.count()

    def validate_key(self, value: str) -> str:
        return value.strip().upper()

    def validate_workspace(self, value):
        if self.instance is not None and value != self.instance.workspace:
            raise serializers.ValidationError("A project cannot be moved to another workspace.")
        if not value.is_active:
            raise serializers.ValidationError("Workspace is not active.")
        return value

    def validate(self, data):
        workspace = data.get('workspace') or getattr(self.instance, 'workspace', None)
        key = data.get('key')
        if workspace is not None and key:
            duplicates = Project.objects.filter(workspace=workspace, key=key)
            if self.instance is not None:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                raise serializers.ValidationError({"key": "Project with this key already exists in the workspace."})
        return data


class MemberSerializer(serializers.ModelSerializer):
    user_info = ProfileSerializer(source="user", read_only=True)
    date_joined_to_project = serializers.DateTimeField(
        source="created_at",
        format="%Y-%m-%d %H:%M:%S",
        read_only=True
    )
    date_update_in_project = serializers.DateTimeField(
        source="updated_at",
        format="%Y-%m-%d %H:%M:%S",
        read_only=True
    )

    class Meta:
        model = ProjectMember
        fields = ['id', 'user_info', 'project', 'is_active', 'date_joined_to_project', 'date_update_in_project']
        read_only_fields = fields


class AddProjectMemberSerializer(serializers.Serializer):
    """
    Adds an existing user to a project. The user must be an active member of
    the project's workspace.
    """

    email = serializers.EmailField()

    def validate(self, data):
        project = self.context['project']

        member = (
            project.workspace.members
            .select_related("user")
            .filter(user__email__iexact=data['email'])
            .first()
        )
        if member is None or get_active_member(member.user, project.workspace) is None:
            raise serializers.ValidationError({"email": "User is not an active member of the project's workspace."})

        if ProjectMember.objects.filter(project=project, user=member.user).exists():
            raise serializers.ValidationError({"email": "User is already a member of this project."})

        data['user'] = member.user
        return data

    def create(self, validated_data):
        return ProjectMember.objects.create(user=validated_data['user'], project=self.context['project'])
