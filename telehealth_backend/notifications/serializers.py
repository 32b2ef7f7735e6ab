from rest_framework import serializers

from telehealth_backend.notifications.models import Notification


class NotificationReadSerializer(serializers.ModelSerializer):
    is_read = serializers.BooleanField(read_only=True)

    class Meta:
        model = Notification
        fields = [
            'id',
            'recipient_email',
            'recipient',
            'type',
            'channel',
            'subject',
            'body',
            'status',
            'sent_at',
            'read_at',
            'is_read',
            'metadata',
            'created_at',
        ]
        read_only_fields = fields


class NotificationWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['recipient_email', 'type', 'channel', 'subject', 'body', 'metadata']

    def validate_recipient_email(self, value):
        return value.strip().lower()


class NotificationFailedSerializer(serializers.Serializer):
    error = serializers.CharField(max_length=1000)
