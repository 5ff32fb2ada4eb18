from rest_framework import serializers

from workspace.constants import DEFAULT_MEMBER_ROLE
from workspace.models import Workspace, WorkspaceMember, WorkspaceRole
from accounts.serializers import ProfileSerializer


class WorkspaceSerializer(serializers.ModelSerializer):
    owner = serializers.ReadOnlyField(source='owner.id')

    class Meta:
        model = Workspace
        fields = [
            'id',
            'name',
            'description',
            'owner',
            'avatar_background',
            'avatar_emoji',
            'avatar_image',
            'is_active',
            'created_at',
            'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at', 'owner']

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Workspace name cannot be blank.")
        return value


class RoleSerializer(serializers.ModelSerializer):

    class Meta:
        model = WorkspaceRole
        fields = ['id', 'name', 'description', 'settings']
        read_only_fields = ['id']


class RoleSubSerializer(serializers.ModelSerializer):

    class Meta:
        model = WorkspaceRole
        fields = ['id', 'name', 'description']
        read_only_fields = ['id']


class MemberSerializer(serializers.ModelSerializer):
    user_info = ProfileSerializer(source="user", read_only=True)
    role_info = RoleSubSerializer(source="role", read_only=True)
    date_joined_to_workspace = serializers.DateTimeField(
        source="joined_at",
        format="%Y-%m-%d %H:%M:%S",
        read_only=True
    )

    class Meta:
        model = WorkspaceMember
        fields = ['id', 'user_info', 'workspace', 'role_info', 'status', 'date_joined_to_workspace', 'is_active']
        read_only_fields = fields


class AddWorkspaceMemberSerializer(serializers.Serializer):
    """
    Input for adding a member. The role is picked by `role_id` or `role_name`;
    without either the member gets the regular "user" role.
    """

    email = serializers.EmailField()
    role_id = serializers.IntegerField(required=False)
    role_name = serializers.CharField(required=False)

    def validate(self, data):
        workspace = self.context['workspace']

        role_id = data.get('role_id')
        role_name = data.get('role_name')

        if role_id:
            role = WorkspaceRole.objects.filter(id=role_id, workspace=workspace).first()
            if not role:
                raise serializers.ValidationError(
                    {"role_id": f"Role with id {role_id} does not exist in this workspace."}
                )
        else:
            role_name = (role_name or DEFAULT_MEMBER_ROLE).strip().lower()
            role = WorkspaceRole.objects.filter(name=role_name, workspace=workspace).first()
            if not role:
                raise serializers.ValidationError(
                    {"role_name": f"Role with name '{role_name}' does not exist in this workspace."}
                )

        data['role'] = role
        return data


class MemberLookupSerializer(serializers.Serializer):
    """Identifies a workspace member by exactly one of `user_id` or `email`."""

    user_id = serializers.IntegerField(required=False)
    email = serializers.EmailField(required=False)

    def validate(self, data):
        if sum(bool(data.get(key)) for key in ('user_id', 'email')) != 1:
            raise serializers.ValidationError("You must provide exactly one of: user_id or email.")
        return data


class ChangeRoleSerializer(MemberLookupSerializer):
    new_role = serializers.CharField()

    def validate_new_role(self, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise serializers.ValidationError("`new_role` is required and must be a string.")
        return value


class OwnerChangeSerializer(serializers.Serializer):
    new_owner_id = serializers.IntegerField(required=False)
    new_owner_email = serializers.EmailField(required=False)
    new_member_id = serializers.IntegerField(required=False)

    def validate(self, data):
        provided = [data.get('new_owner_id'), data.get('new_owner_email'), data.get('new_member_id')]
        if sum(bool(x) for x in provided) != 1:
            raise serializers.ValidationError(
                "You must provide exactly one of: new_owner_id, new_owner_email, or new_member_id."
            )
        return data


class WorkspaceDashboardSerializer(serializers.Serializer):
    total_tasks = serializers.IntegerField()
    average_progress = serializers.IntegerField()
    active_projects = serializers.IntegerField()
    projects_behind_schedule = serializers.IntegerField()
    team_members = serializers.IntegerField()
    available_members = serializers.IntegerField()
    unread_notifications = serializers.IntegerField()
