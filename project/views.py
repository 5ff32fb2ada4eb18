from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from project.models import Project, ProjectMember
from project.serializers import ProjectSerializer, MemberSerializer, AddProjectMemberSerializer
from project import services
from workspace.serializers import MemberLookupSerializer, OwnerChangeSerializer
from tools.permissions.base import HasWorkspacePermission, HasProjectPermission
from tools.permissions.constants import OWNER_ONLY_PERMISSION
from tools.query_params import int_param, bool_param


class ProjectCreateAPIView(generics.CreateAPIView):
    """
    Creates a project in the workspace given in the body (`workspace`).

    Requires `can_create_projects`. The creator becomes owner and first member.
    """

    serializer_class = ProjectSerializer
    permission_classes = [permissions.IsAuthenticated, HasWorkspacePermission]
    required_workspace_permission = "can_create_projects"

    def perform_create(self, serializer):
        services.create_project(serializer, self.request.user)


class ProjectListAPIView(generics.ListAPIView):
    """
    Projects the caller is an active member of.

    Query parameters:
        workspace (int): only projects of this workspace.
        active (bool): "true" hides archived projects.
    """

    serializer_class = ProjectSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        params = self.request.query_params
        queryset = Project.objects.filter(members__user=self.request.user, members__is_active=True)

        workspace_id = int_param(params, "workspace")
        if workspace_id is not None:
            queryset = queryset.filter(workspace_id=workspace_id)

        if bool_param(params, "active"):
            queryset = queryset.filter(is_active=True)

        return queryset.distinct().order_by("name", "id")


class ProjectDetailAPIView(APIView):
    """
    GET for project members (or anyone allowed to see public projects),
    PUT (partial) with `can_edit_projects`.
    """

    permission_classes = [permissions.IsAuthenticated, HasProjectPermission]

    def get(self, request, project_id: int) -> Response:
        project = get_object_or_404(Project, id=project_id)
        return Response(ProjectSerializer(project).data, status=status.HTTP_200_OK)

    def put(self, request, project_id: int) -> Response:
        project = get_object_or_404(Project, id=project_id)

        serializer = ProjectSerializer(project, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response(serializer.data, status=status.HTTP_200_OK)


class AddProjectMemberAPIView(APIView):
    """
    Adds an active workspace member to the project.

    Request body:
        {"email": "<str>"}
    """

    permission_classes = [permissions.IsAuthenticated, HasProjectPermission]
    required_project_permission = "can_invite_users_to_project"

    def post(self, request, project_id):
        project = get_object_or_404(Project.objects.select_related("workspace"), id=project_id)

        serializer = AddProjectMemberSerializer(data=request.data, context={'project': project})
        serializer.is_valid(raise_exception=True)

        return Response(MemberSerializer(serializer.save()).data, status=status.HTTP_201_CREATED)


class BaseToggleProjectMemberAPIView(APIView):
    """
    Activates or deactivates a project member, found by `user_id` or `email`.
    Subclasses set `is_active_target`.
    """

    permission_classes = [permissions.IsAuthenticated, HasProjectPermission]
    required_project_permission = "can_deactivate_users_in_project"

    is_active_target: bool = None

    def patch(self, request, project_id):
        project = get_object_or_404(Project, id=project_id)

        lookup = MemberLookupSerializer(data=request.data)
        lookup.is_valid(raise_exception=True)

        member = services.find_project_member(project, **lookup.validated_data)
        member = services.set_member_active(project, member, self.is_active_target)

        state = "activated" if self.is_active_target else "deactivated"
        return Response(
            {"message": f"User has been {state}.", "member": MemberSerializer(member).data},
            status=status.HTTP_200_OK
        )


class DeactivateProjectMemberAPIView(BaseToggleProjectMemberAPIView):
    is_active_target = False


class ActivateProjectMemberAPIView(BaseToggleProjectMemberAPIView):
    is_active_target = True


class ProjectMembersListAPIView(generics.ListAPIView):
    serializer_class = MemberSerializer
    permission_classes = [permissions.IsAuthenticated, HasProjectPermission]
    required_project_permission = "can_view_project"

    def get_queryset(self):
        return (
            ProjectMember.objects
            .filter(project_id=self.kwargs["project_id"])
            .select_related("user")
            .order_by("created_at", "id")
        )


class BaseToggleProjectActivationAPIView(APIView):
    """
    Archives (deactivates) or restores a project. Requires `can_delete_projects`.
    Archived projects keep their tasks but accept no new ones.
    """

    permission_classes = [permissions.IsAuthenticated, HasProjectPermission]
    required_project_permission = "can_delete_projects"

    is_active_target: bool = None

    def patch(self, request, project_id):
        project = get_object_or_404(Project, id=project_id)
        project = services.set_project_active(project, self.is_active_target, request.user)

        state = "activated" if self.is_active_target else "deactivated"
        return Response(
            {"message": f"Project has been {state}.", "data": ProjectSerializer(project).data},
            status=status.HTTP_200_OK
        )


class DeactivateProjectAPIView(BaseToggleProjectActivationAPIView):
    is_active_target = False


class ActivateProjectAPIView(BaseToggleProjectActivationAPIView):
    is_active_target = True


class ChangeProjectOwnerAPIView(APIView):
    """
    Transfers project ownership to an active project member, identified by exactly
    one of `new_owner_id`, `new_owner_email` or `new_member_id`.
    Only the project owner (or the workspace owner) may do this.
    """

    permission_classes = [permissions.IsAuthenticated, HasProjectPermission]
    required_project_permission = OWNER_ONLY_PERMISSION

    def post(self, request, project_id):
        project = get_object_or_404(Project, id=project_id)

        serializer = OwnerChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = services.transfer_project_ownership(project, **serializer.validated_data)
        return Response(ProjectSerializer(project).data, status=status.HTTP_200_OK)
