"""
Notifications app services layer.
"""

from .exceptions import (
    NotificationsServiceError,
    NotificationNotFoundError,
)

from .notification_delivery import (
    DatabaseNotificationSink,
    get_notification_sink,
    list_notifications,
    mark_notification_read,
    mark_all_read,
)


__all__ = [
    # Exceptions
    'NotificationsServiceError',
    'NotificationNotFoundError',

    # Delivery
    'DatabaseNotificationSink',
    'get_notification_sink',
    'list_notifications',
    'mark_notification_read',
    'mark_all_read',
]
