from django.db.models import Max
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from workspace.models import Workspace, WorkspaceMember, WorkspaceRole
from workspace.serializers import (
    WorkspaceSerializer,
    AddWorkspaceMemberSerializer,
    RoleSerializer,
    MemberSerializer,
    MemberLookupSerializer,
    ChangeRoleSerializer,
    OwnerChangeSerializer,
    WorkspaceDashboardSerializer,
)
from workspace import services
from tools.permissions.base import HasWorkspacePermission, get_active_member, get_role_settings
from tools.permissions.constants import DEFAULT_ALWAYS_ALLOWED_PERMISSIONS, OWNER_ONLY_PERMISSION
from tools.permissions.defaults import ALL_PERMISSIONS
from tools.query_params import bool_param


class WorkspaceCreateAPIView(generics.CreateAPIView):
    """
    Creates a workspace. The caller becomes its owner and an admin member.
    """

    serializer_class = WorkspaceSerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_create(self, serializer):
        serializer.instance = services.create_workspace(self.request.user, **serializer.validated_data)


class WorkspaceListAPIView(generics.ListAPIView):
    """
    Workspaces the caller is an active member of, most recently joined first.
    """

    serializer_class = WorkspaceSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        user = self.request.user
        return (
            Workspace.objects
            .filter(members__user=user, members__is_active=True)
            .annotate(joined_at=Max("members__joined_at"))
            .order_by("-joined_at", "-id")
        )


class MembersListAPIView(generics.ListAPIView):
    serializer_class = MemberSerializer
    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_view_workspace"

    def get_queryset(self):
        workspace_id = self.kwargs['workspace_id']
        queryset = (
            WorkspaceMember.objects
            .filter(workspace_id=workspace_id)
            .select_related("user", "role")
            .order_by("joined_at", "id")
        )

        if bool_param(self.request.query_params, "active"):
            queryset = queryset.filter(is_active=True)

        return queryset


class WorkspaceRoleListAPIView(generics.ListAPIView):
    serializer_class = RoleSerializer
    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_view_workspace"

    def get_queryset(self):
        return WorkspaceRole.objects.filter(workspace_id=self.kwargs['workspace_id']).order_by("id")


class MyWorkspacePermissionsAPIView(APIView):
    """
    The caller's role and effective permission flags in the workspace.

    Clients use it to show or hide actions such as "New task".
    """

    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_view_workspace"

    def get(self, request, workspace_id: int) -> Response:
        workspace = get_object_or_404(Workspace, id=workspace_id)
        is_owner = workspace.owner_id == request.user.id
        member = get_active_member(request.user, workspace)

        if is_owner:
            flags = dict.fromkeys(ALL_PERMISSIONS, True)
        else:
            flags = dict(get_role_settings(member))

        for name in DEFAULT_ALWAYS_ALLOWED_PERMISSIONS:
            flags[name] = True

        return Response(
            {
                "workspace": workspace.id,
                "is_owner": is_owner,
                "role_name": member.role.name if member and member.role else "No Role",
                "permissions": flags,
            },
            status=status.HTTP_200_OK
        )


class AddWorkspaceMemberAPIView(APIView):
    """
    Adds a user to the workspace by email.

    Unknown emails are invited: an inactive account is created and a
    set-password link is emailed.

    Request body:
        {"email": "<str>", "role_id": <int>}  or  {"email": "<str>", "role_name": "<str>"}
    """

    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_invite_users_to_workspace"

    def post(self, request, workspace_id):
        workspace = get_object_or_404(Workspace, id=workspace_id)

        serializer = AddWorkspaceMemberSerializer(data=request.data, context={'workspace': workspace})
        serializer.is_valid(raise_exception=True)

        member = services.add_member(
            workspace,
            email=serializer.validated_data["email"],
            role=serializer.validated_data["role"],
            invited_by=request.user,
        )

        return Response(MemberSerializer(member).data, status=status.HTTP_201_CREATED)


class BaseToggleWorkspaceMemberAPIView(APIView):
    """
    Shared logic for activating and deactivating a workspace member.

    Subclasses set `is_active_target`.

    Request body:
        {"user_id": <int>} or {"email": "<str>"}

    Responses:
        200 OK: {"message": "User has been activated|deactivated.", "member": {...}}
        400 BAD REQUEST: invalid input, unknown user, not a member, already in the
            target state, or an attempt to toggle the owner.
    """

    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_deactivate_users_in_workspace"

    is_active_target: bool = None

    def patch(self, request, workspace_id):
        workspace = get_object_or_404(Workspace, id=workspace_id)

        serializer = MemberLookupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        member = services.find_member(workspace, **serializer.validated_data)
        member = services.set_member_active(workspace, member, self.is_active_target)

        state = "activated" if self.is_active_target else "deactivated"
        return Response(
            {"message": f"User has been {state}.", "member": MemberSerializer(member).data},
            status=status.HTTP_200_OK
        )


class DeactivateWorkspaceMemberAPIView(BaseToggleWorkspaceMemberAPIView):
    is_active_target = False


class ActivateWorkspaceMemberAPIView(BaseToggleWorkspaceMemberAPIView):
    is_active_target = True


class ChangeWorkspaceRoleAPIView(APIView):
    """
    Changes a member's role.

    Request body:
        {"user_id": <int> | "email": "<str>", "new_role": "<role name>"}

    See `workspace.services.change_member_role` for the rules (403 when a
    non-owner tries to change an admin).
    """

    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_change_role_in_workspace"

    def patch(self, request, workspace_id):
        workspace = get_object_or_404(Workspace, id=workspace_id)

        serializer = ChangeRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_role_name = serializer.validated_data.pop("new_role")

        member = services.find_member(workspace, **serializer.validated_data)
        member = services.change_member_role(workspace, member, new_role_name, request.user)

        return Response({
            "message": f"User's role changed to {new_role_name}.",
            "member": MemberSerializer(member).data
        }, status=status.HTTP_200_OK)


class WorkspaceDetailAPIView(APIView):
    """
    Retrieve (any active member) or partially update (`can_edit_workspace`) a workspace.
    """

    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]

    def get(self, request, workspace_id: int) -> Response:
        workspace = get_object_or_404(Workspace, id=workspace_id)
        serializer = WorkspaceSerializer(workspace)
        return Response(serializer.data, status=status.HTTP_200_OK)

    def put(self, request, workspace_id: int) -> Response:
        workspace = get_object_or_404(Workspace, id=workspace_id)
        serializer = WorkspaceSerializer(workspace, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)


class WorkspaceOwnerChangeAPIView(APIView):
    """
    Transfers ownership to an existing member, identified by exactly one of
    `new_owner_id`, `new_owner_email` or `new_member_id`. Owner only.
    The new owner receives the admin role.
    """

    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = OWNER_ONLY_PERMISSION

    def post(self, request, workspace_id):
        workspace = get_object_or_404(Workspace, id=workspace_id)

        serializer = OwnerChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data.get("new_member_id"):
            member = (
                WorkspaceMember.objects
                .select_related("user")
                .filter(id=data["new_member_id"], workspace=workspace)
                .first()
            )
            if not member:
                return Response(
                    {"detail": "The specified member does not belong to this workspace."},
                    status=status.HTTP_400_BAD_REQUEST
                )
        else:
            member = services.find_member(
                workspace, user_id=data.get("new_owner_id"), email=data.get("new_owner_email")
            )

        services.transfer_ownership(workspace, member)

        return Response(WorkspaceSerializer(workspace).data, status=status.HTTP_200_OK)


class WorkspaceDashboardAPIView(APIView):
    """
    Overview figures for the workspace dashboard cards. Requires `can_view_reports`.
    """

    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_view_reports"

    def get(self, request, workspace_id: int) -> Response:
        workspace = get_object_or_404(Workspace, id=workspace_id)
        data = services.get_dashboard(workspace, request.user)
        return Response(WorkspaceDashboardSerializer(data).data, status=status.HTTP_200_OK)
