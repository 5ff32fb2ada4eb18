from rest_framework import serializers

from notification.models import Notification
from notification.services import relative_time


class NotificationSerializer(serializers.ModelSerializer):
    time = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField(format="%Y-%m-%d %H:%M:%S", read_only=True)

    class Meta:
        model = Notification
        fields = ['id', 'message', 'workspace', 'task', 'is_read', 'time', 'created_at']
        read_only_fields = fields

    def get_time(self, obj) -> str:
        return relative_time(obj.created_at, now=self.context.get("now"))
