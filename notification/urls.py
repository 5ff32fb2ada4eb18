from django.urls import path
from notification.views import (
    NotificationListAPIView,
    UnreadCountAPIView,
    MarkNotificationReadAPIView,
    MarkAllNotificationsReadAPIView,
)

urlpatterns = [
    path('get_list/', NotificationListAPIView.as_view(), name='notification-list'),
    path('unread_count/', UnreadCountAPIView.as_view(), name='notification-unread-count'),
    path('mark_all_read/', MarkAllNotificationsReadAPIView.as_view(), name='notification-mark-all-read'),
    path('<int:notification_id>/read/', MarkNotificationReadAPIView.as_view(), name='notification-read'),
]
