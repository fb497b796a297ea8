import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def _add_member(group, user, role, position):
    """Add a member with a deterministic join time."""
    membership = GroupMembership.objects.create(user=user, group=group, role=role)
    joined_at = timezone.now() - timedelta(hours=1) + timedelta(seconds=position)
    GroupMembership.objects.filter(pk=membership.pk).update(joined_at=joined_at)
    return membership


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def alice(db):
    """Group admin."""
    return User.objects.create_user(
        email='alice@example.com',
        password='TestPass123!',
        display_name='Alice',
    )


@pytest.fixture
def bob(db):
    return User.objects.create_user(
        email='bob@example.com',
        password='TestPass123!',
        display_name='Bob',
    )


@pytest.fixture
def carol(db):
    return User.objects.create_user(
        email='carol@example.com',
        password='TestPass123!',
        display_name='Carol',
    )


@pytest.fixture
def outsider(db):
    """User not in the group."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider',
    )


@pytest.fixture
def group(db, alice, bob, carol):
    """Group of alice (admin), bob and carol, in that join order."""
    group = Group.objects.create(name='Trip', creator=alice)
    _add_member(group, alice, GroupRole.ADMIN, 0)
    _add_member(group, bob, GroupRole.MEMBER, 1)
    _add_member(group, carol, GroupRole.MEMBER, 2)
    return group


@pytest.fixture
def alice_client(alice):
    return _client_for(alice)


@pytest.fixture
def bob_client(bob):
    return _client_for(bob)


@pytest.fixture
def carol_client(carol):
    return _client_for(carol)


@pytest.fixture
def outsider_client(outsider):
    return _client_for(outsider)
