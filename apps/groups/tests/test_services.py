"""
Service layer unit tests for groups app.

Tests cover:
- Transaction safety
- Business logic validation
- Error handling
"""

import pytest
from uuid import uuid4
from unittest.mock import patch

from apps.groups.models import Group, GroupMembership, GroupRole
from apps.groups.services import (
    create_group,
    get_group_for_member,
    update_group,
    join_group,
    leave_group,
    get_group_members,
    regenerate_invite_code,
)
from apps.groups.services.exceptions import (
    GroupNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)


# =============================================================================
# Group Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupManagement:
    """Tests for group_management.py service functions."""

    def test_create_group_success(self, group_creator):
        """Creating a group also creates admin membership for the creator."""
        group = create_group(
            name="  Trip to Goa  ",
            creator=group_creator,
            description="Beach week",
        )

        assert group.name == "Trip to Goa"
        assert group.creator == group_creator
        assert group.icon == '👥'
        assert group.is_active is True
        assert len(group.invite_code) == 8
        assert group.invite_code == group.invite_code.upper()

        membership = GroupMembership.objects.get(group=group, user=group_creator)
        assert membership.role == GroupRole.ADMIN

    def test_create_group_custom_icon(self, group_creator):
        group = create_group(name="Office", creator=group_creator, icon='🏢')
        assert group.icon == '🏢'

    def test_create_group_blank_name(self, group_creator):
        with pytest.raises(ValueError):
            create_group(name="   ", creator=group_creator)

        assert Group.objects.count() == 0

    def test_create_group_retries_on_invite_collision(self, group, group_creator):
        """A colliding invite code is retried with a fresh one."""
        codes = iter([group.invite_code, 'ABCD1234'])
        with patch(
            'apps.groups.services.group_management.generate_invite_code',
            side_effect=lambda: next(codes),
        ):
            new_group = create_group(name="Second", creator=group_creator)

        assert new_group.invite_code == 'ABCD1234'
        assert Group.objects.count() == 2

    def test_create_group_gives_up_after_retries(self, group, group_creator):
        with patch(
            'apps.groups.services.group_management.generate_invite_code',
            return_value=group.invite_code,
        ):
            with pytest.raises(RuntimeError):
                create_group(name="Second", creator=group_creator, max_retries=3)

    def test_get_group_for_member_hides_from_non_member(self, group, other_user):
        with pytest.raises(GroupNotFoundError):
            get_group_for_member(group_id=group.id, user=other_user)

    def test_get_group_for_member_missing(self, group_creator):
        with pytest.raises(GroupNotFoundError):
            get_group_for_member(group_id=uuid4(), user=group_creator)

    def test_update_group_by_admin(self, group, group_creator):
        updated = update_group(
            group_id=group.id,
            user=group_creator,
            name="Renamed",
            description="New description",
        )

        assert updated.name == "Renamed"
        assert updated.description == "New description"

    def test_update_group_by_member_denied(self, group_with_member, member_user):
        with pytest.raises(InsufficientPermissionsError):
            update_group(group_id=group_with_member.id, user=member_user, name="Nope")

    def test_update_group_by_non_member(self, group, other_user):
        with pytest.raises(GroupNotFoundError):
            update_group(group_id=group.id, user=other_user, name="Nope")

    @pytest.mark.parametrize('name', ['', '   '])
    def test_update_group_blank_name(self, group, group_creator, name):
        old_name = group.name

        with pytest.raises(ValueError):
            update_group(group_id=group.id, user=group_creator, name=name)

        group.refresh_from_db()
        assert group.name == old_name

    def test_update_group_name_is_stripped(self, group, group_creator):
        updated = update_group(group_id=group.id, user=group_creator, name="  Flatmates  ")

        assert updated.name == "Flatmates"

    def test_regenerate_invite_code(self, group, group_creator):
        old_code = group.invite_code

        new_code = regenerate_invite_code(group_id=group.id, user=group_creator)

        group.refresh_from_db()
        assert new_code != old_code
        assert group.invite_code == new_code

    def test_regenerate_invite_code_member_denied(self, group_with_member, member_user):
        with pytest.raises(InsufficientPermissionsError):
            regenerate_invite_code(group_id=group_with_member.id, user=member_user)


# =============================================================================
# Membership Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestMembershipManagement:
    """Tests for membership_management.py service functions."""

    def test_join_group_success(self, group, member_user):
        membership = join_group(invite_code=group.invite_code, user=member_user)

        assert membership.group == group
        assert membership.role == GroupRole.MEMBER

    def test_join_group_case_insensitive(self, group, member_user):
        membership = join_group(invite_code=group.invite_code.lower(), user=member_user)

        assert membership.group == group

    def test_join_group_invalid_code(self, member_user):
        with pytest.raises(InvalidInviteCodeError):
            join_group(invite_code='ZZZZZZZZ', user=member_user)

    def test_join_inactive_group(self, group, member_user):
        group.is_active = False
        group.save()

        with pytest.raises(InvalidInviteCodeError):
            join_group(invite_code=group.invite_code, user=member_user)

    def test_join_group_already_member(self, group, group_creator):
        with pytest.raises(AlreadyMemberError):
            join_group(invite_code=group.invite_code, user=group_creator)

    def test_leave_group(self, group_with_member, member_user):
        group = leave_group(group_id=group_with_member.id, user=member_user)

        assert group.is_active is True
        assert not group.has_member(member_user)

    def test_last_member_leaving_deactivates_group(self, group, group_creator):
        group = leave_group(group_id=group.id, user=group_creator)

        group.refresh_from_db()
        assert group.is_active is False
        assert Group.objects.filter(id=group.id).exists()

    def test_leave_group_not_member(self, group, other_user):
        with pytest.raises(NotMemberError):
            leave_group(group_id=group.id, user=other_user)

    def test_get_group_members_in_join_order(self, group_with_member, group_creator, member_user):
        members = list(get_group_members(group_id=group_with_member.id))

        assert [m.user for m in members] == [group_creator, member_user]

    def test_get_group_members_missing_group(self):
        with pytest.raises(GroupNotFoundError):
            get_group_members(group_id=uuid4())
