"""
Notification delivery service.

Ledger services hand notifications to a sink object instead of writing
records themselves. The default sink stores in-app notifications; a
different sink can be configured with the NOTIFICATION_SINK setting or
passed directly to the calling service.
"""

import logging
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils.module_loading import import_string

from apps.accounts.models import User
from apps.notifications.models import Notification

from .exceptions import NotificationNotFoundError

logger = logging.getLogger(__name__)


class DatabaseNotificationSink:
    """Stores notifications as in-app Notification records."""

    def send(
        self,
        *,
        user: User,
        type: str,
        title: str,
        message: str,
        data: Optional[dict] = None
    ) -> Notification:
        notification = Notification.objects.create(
            user=user,
            type=type,
            title=title,
            message=message,
            data=data or {},
        )
        logger.info("Notification %s (%s) stored for user %s", notification.id, type, user.id)
        return notification


def get_notification_sink():
    """Instantiate the sink named by the NOTIFICATION_SINK setting."""
    sink_class = import_string(settings.NOTIFICATION_SINK)
    return sink_class()


def list_notifications(*, user: User, unread_only: bool = False) -> QuerySet[Notification]:
    """Get a user's notifications, newest first."""
    queryset = Notification.objects.filter(user=user)
    if unread_only:
        queryset = queryset.filter(is_read=False)
    return queryset.order_by('-created_at')


@transaction.atomic
def mark_notification_read(*, notification_id: UUID, user: User) -> Notification:
    """
    Mark one of the user's notifications as read.

    Raises:
        NotificationNotFoundError: If the notification doesn't exist or
            belongs to another user
    """
    try:
        notification = (
            Notification.objects
            .select_for_update()
            .get(id=notification_id, user=user)
        )
    except Notification.DoesNotExist:
        raise NotificationNotFoundError(f"Notification with ID {notification_id} not found")

    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])

    return notification


def mark_all_read(*, user: User) -> int:
    """Mark every unread notification of the user as read; returns the count."""
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)
