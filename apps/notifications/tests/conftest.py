import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.notifications.models import Notification, NotificationType


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='user@example.com',
        password='TestPass123!',
        display_name='Test User',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


@pytest.fixture
def authenticated_client(user):
    return _client_for(user)


@pytest.fixture
def other_client(other_user):
    return _client_for(other_user)


@pytest.fixture
def reminder(user):
    """Unread payment reminder for user."""
    return Notification.objects.create(
        user=user,
        type=NotificationType.PAYMENT_REMINDER,
        title='Payment Reminder from Trip',
        message='Other User is requesting payment of 30.00 INR in group "Trip"',
        data={'amount': '30.00'},
    )


@pytest.fixture
def confirmation(user):
    """Already read payment confirmation for user."""
    notification = Notification.objects.create(
        user=user,
        type=NotificationType.PAYMENT_CONFIRMED,
        title='Payment confirmed in Trip',
        message='Other User confirmed your payment',
        is_read=True,
    )
    Notification.objects.filter(pk=notification.pk).update(
        created_at=timezone.now() - timedelta(days=1)
    )
    notification.refresh_from_db()
    return notification
