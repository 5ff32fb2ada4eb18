from django.urls import path
from project.views import (
    ProjectCreateAPIView,
    ProjectListAPIView,
    ProjectDetailAPIView,
    AddProjectMemberAPIView,
    ActivateProjectMemberAPIView,
    DeactivateProjectMemberAPIView,
    ProjectMembersListAPIView,
    ActivateProjectAPIView,
    DeactivateProjectAPIView,
    ChangeProjectOwnerAPIView,
)

urlpatterns = [
    path('create/', ProjectCreateAPIView.as_view(), name='project-create'),
    path('get_list/', ProjectListAPIView.as_view(), name='project-list'),
    path("<int:project_id>/", ProjectDetailAPIView.as_view(), name="project-detail"),
    path("<int:project_id>/activate/", ActivateProjectAPIView.as_view(), name="project-activate"),
    path("<int:project_id>/deactivate/", DeactivateProjectAPIView.as_view(), name="project-deactivate"),
    path("<int:project_id>/change_owner/", ChangeProjectOwnerAPIView.as_view(), name="project-change-owner"),

    path("<int:project_id>/add_member/", AddProjectMemberAPIView.as_view(), name="project-add-member"),
    path("<int:project_id>/deactivate_member/", DeactivateProjectMemberAPIView.as_view(), name="project-deactivate-member"),
    path("<int:project_id>/activate_member/", ActivateProjectMemberAPIView.as_view(), name="project-activate-member"),
    path("<int:project_id>/list_member/", ProjectMembersListAPIView.as_view(), name="project-list-member"),
]
