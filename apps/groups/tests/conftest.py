import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole


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
def group_creator(db):
    """Create and return a test user (group creator)."""
    return User.objects.create_user(
        email='creator@example.com',
        password='TestPass123!',
        display_name='Group Creator',
    )


@pytest.fixture
def member_user(db):
    """Create and return a member user."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Group Member',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user not in any group."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


@pytest.fixture
def group(db, group_creator):
    """Create a group with its creator as admin."""
    group = Group.objects.create(
        name='Flatmates',
        description='Shared flat costs',
        creator=group_creator,
    )
    GroupMembership.objects.create(user=group_creator, group=group, role=GroupRole.ADMIN)
    return group


@pytest.fixture
def group_with_member(group, member_user):
    """Group with creator (admin) and one regular member."""
    GroupMembership.objects.create(user=member_user, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def creator_client(group_creator):
    """Return API client authenticated as the group creator."""
    return _client_for(group_creator)


@pytest.fixture
def member_client(member_user):
    """Return API client authenticated as a regular member."""
    return _client_for(member_user)


@pytest.fixture
def other_client(other_user):
    """Return API client authenticated as a non-member."""
    return _client_for(other_user)
