from django.conf import settings
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, permissions, status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from notification.models import Notification
from notification.serializers import NotificationSerializer
from notification import services
from tools.query_params import int_param, bool_param


class NotificationListAPIView(generics.ListAPIView):
    """
    The caller's notifications, newest first.

    Query parameters:
        limit (int): How many to return. Defaults to NOTIFICATIONS_DEFAULT_LIMIT,
            capped at NOTIFICATIONS_MAX_LIMIT.
        unread (bool): "true" returns only unread notifications.
        workspace (int): Restrict to one workspace.
    """

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_limit(self) -> int:
        limit = int_param(self.request.query_params, "limit")
        if limit is None:
            return settings.NOTIFICATIONS_DEFAULT_LIMIT
        if limit < 1:
            raise ValidationError({"limit": "Must be a positive integer."})
        return min(limit, settings.NOTIFICATIONS_MAX_LIMIT)

    def get_queryset(self):
        params = self.request.query_params
        queryset = Notification.objects.filter(user=self.request.user)

        if bool_param(params, "unread"):
            queryset = queryset.filter(is_read=False)

        workspace_id = int_param(params, "workspace")
        if workspace_id is not None:
            queryset = queryset.filter(workspace_id=workspace_id)

        return queryset.order_by("-created_at", "-id")[:self.get_limit()]

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["now"] = timezone.now()
        return context


class UnreadCountAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({"unread": services.unread_count(request.user)}, status=status.HTTP_200_OK)


class MarkNotificationReadAPIView(APIView):
    """
    Marks one of the caller's notifications as read. Other users' notifications are a 404.
    """

    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, notification_id: int) -> Response:
        notification = get_object_or_404(Notification, id=notification_id, user=request.user)

        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read"])

        serializer = NotificationSerializer(notification, context={"now": timezone.now()})
        return Response(serializer.data, status=status.HTTP_200_OK)


class MarkAllNotificationsReadAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        updated = services.mark_all_read(request.user)
        return Response(
            {"message": "All notifications marked as read.", "updated": updated},
            status=status.HTTP_200_OK
        )
