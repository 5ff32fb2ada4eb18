from django.urls import path
from workspace.views import (
    WorkspaceCreateAPIView, WorkspaceListAPIView,
    AddWorkspaceMemberAPIView, WorkspaceDetailAPIView,
    ActivateWorkspaceMemberAPIView, DeactivateWorkspaceMemberAPIView,
    ChangeWorkspaceRoleAPIView, WorkspaceOwnerChangeAPIView,
    WorkspaceRoleListAPIView, MembersListAPIView,
    MyWorkspacePermissionsAPIView, WorkspaceDashboardAPIView,
)

urlpatterns = [
    path('create/', WorkspaceCreateAPIView.as_view(), name='workspace-create'),
    path('get_list/', WorkspaceListAPIView.as_view(), name='workspace-list'),

    path("<int:workspace_id>/", WorkspaceDetailAPIView.as_view(), name="workspace-detail"),
    path("<int:workspace_id>/dashboard/", WorkspaceDashboardAPIView.as_view(), name="workspace-dashboard"),
    path("<int:workspace_id>/my_permissions/", MyWorkspacePermissionsAPIView.as_view(), name="workspace-my-permissions"),
    path("<int:workspace_id>/add_member/", AddWorkspaceMemberAPIView.as_view(), name="workspace-add-member"),
    path("<int:workspace_id>/members_list/", MembersListAPIView.as_view(), name="workspace-members-list"),
    path("<int:workspace_id>/activate_member/", ActivateWorkspaceMemberAPIView.as_view(), name="workspace-activate-member"),
    path("<int:workspace_id>/deactivate_member/", DeactivateWorkspaceMemberAPIView.as_view(), name="workspace-deactivate-member"),
    path("<int:workspace_id>/change_role_member/", ChangeWorkspaceRoleAPIView.as_view(), name="workspace-change-role"),
    path("<int:workspace_id>/change_owner/", WorkspaceOwnerChangeAPIView.as_view(), name="workspace-change-owner"),
    path("<int:workspace_id>/workspace_roles/", WorkspaceRoleListAPIView.as_view(), name="workspace-roles"),
]
