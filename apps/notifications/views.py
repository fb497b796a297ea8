from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import NotificationSerializer
from apps.notifications.services import (
    list_notifications,
    mark_notification_read,
    mark_all_read,
    NotificationNotFoundError,
)


class NotificationPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Current user's notifications.

    list: Get notifications, newest first (?unread=true for unread only)
    retrieve: Get one notification
    read: Mark a notification as read
    read_all: Mark every notification as read
    """

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = NotificationPagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        unread_only = self.request.query_params.get('unread', '').lower() == 'true'
        return list_notifications(user=self.request.user, unread_only=unread_only)

    @extend_schema(
        parameters=[
            OpenApiParameter(name='unread', type=bool, description='Only unread notifications'),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @action(detail=True, methods=['post'])
    def read(self, request, pk=None):
        """Mark notification as read."""
        try:
            notification = mark_notification_read(notification_id=pk, user=request.user)
        except NotificationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(NotificationSerializer(notification).data)

    @action(detail=False, methods=['post'])
    def read_all(self, request):
        """Mark all notifications as read."""
        count = mark_all_read(user=request.user)
        return Response({'marked_read': count})
