from django.urls import path
from task.views import (
    TaskCreateAPIView,
    WorkspaceTaskListAPIView,
    TaskBoardAPIView,
    MyTaskListAPIView,
    TaskDetailAPIView,
    TaskStatusAPIView,
)

urlpatterns = [
    path('create/', TaskCreateAPIView.as_view(), name='task-create'),
    path('my/', MyTaskListAPIView.as_view(), name='task-my-list'),
    path('workspace/<int:workspace_id>/', WorkspaceTaskListAPIView.as_view(), name='task-workspace-list'),
    path('workspace/<int:workspace_id>/board/', TaskBoardAPIView.as_view(), name='task-board'),
    path('<int:task_id>/', TaskDetailAPIView.as_view(), name='task-detail'),
    path('<int:task_id>/status/', TaskStatusAPIView.as_view(), name='task-status'),
]
