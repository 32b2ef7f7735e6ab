"""Notification inbox and delivery bookkeeping."""

from django.shortcuts import get_object_or_404

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from telehealth_backend.core import capabilities
from telehealth_backend.core.utils import log_action
from telehealth_backend.notifications import services
from telehealth_backend.notifications.models import Notification
from telehealth_backend.notifications.permissions import (
    NotificationDeliveryPermission,
    NotificationInboxPermission,
    NotificationPermission,
)
from telehealth_backend.notifications.serializers import (
    NotificationFailedSerializer,
    NotificationReadSerializer,
    NotificationWriteSerializer,
)


def _own_notifications(user):
    return Notification.objects.filter(recipient_email=(user.email or '').lower())


class NotificationListCreateView(generics.ListCreateAPIView):
    """List own notifications or create one.

    GET  /api/notifications/?unread=1
    POST /api/notifications/?deliver=1
    """

    permission_classes = [NotificationPermission]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return NotificationWriteSerializer
        return NotificationReadSerializer

    def get_queryset(self):
        user = self.request.user
        params = self.request.query_params

        if capabilities.is_admin(user) and (params.get('status') or params.get('type')):
            qs = Notification.objects.all()
        else:
            qs = _own_notifications(user)

        if params.get('unread') in ('1', 'true'):
            qs = qs.filter(read_at__isnull=True)
        if params.get('status'):
            qs = qs.filter(status=params['status'])
        if params.get('type'):
            qs = qs.filter(type=params['type'])
        return qs.order_by('-created_at', '-id')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        notification = services.create_notification(**serializer.validated_data)

        if request.query_params.get('deliver') in ('1', 'true'):
            services.deliver(notification)

        log_action(
            request.user,
            'notification_created',
            'notification',
            notification.id,
            changes={'type': notification.type, 'status': notification.status},
            request=request,
        )
        return Response(NotificationReadSerializer(notification).data, status=status.HTTP_201_CREATED)


class UnreadCountView(APIView):
    permission_classes = [NotificationInboxPermission]

    def get(self, request, *args, **kwargs):
        return Response({'count': services.unread_count(request.user.email)})


class NotificationMarkReadView(APIView):
    permission_classes = [NotificationInboxPermission]

    def post(self, request, pk, *args, **kwargs):
        notification = get_object_or_404(_own_notifications(request.user), pk=pk)
        services.mark_read(notification)
        log_action(request.user, 'notification_read', 'notification', notification.id, request=request)
        return Response(NotificationReadSerializer(notification).data)


class NotificationMarkAllReadView(APIView):
    permission_classes = [NotificationInboxPermission]

    def post(self, request, *args, **kwargs):
        count = services.mark_all_read(request.user.email)
        log_action(request.user, 'notifications_read_all', 'notification', changes={'count': count}, request=request)
        return Response({'count': count})


class NotificationMarkSentView(APIView):
    permission_classes = [NotificationDeliveryPermission]

    def post(self, request, pk, *args, **kwargs):
        notification = get_object_or_404(Notification, pk=pk)
        services.mark_sent(notification)
        log_action(request.user, 'notification_sent', 'notification', notification.id, request=request)
        return Response(NotificationReadSerializer(notification).data)


class NotificationMarkFailedView(APIView):
    permission_classes = [NotificationDeliveryPermission]

    def post(self, request, pk, *args, **kwargs):
        notification = get_object_or_404(Notification, pk=pk)
        serializer = NotificationFailedSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.mark_failed(notification, serializer.validated_data['error'])
        log_action(
            request.user,
            'notification_failed',
            'notification',
            notification.id,
            changes={'error': serializer.validated_data['error']},
            request=request,
        )
        return Response(NotificationReadSerializer(notification).data)
