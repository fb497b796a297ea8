"""
Membership management service.

Handles group membership operations with concurrency protection.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole

from .exceptions import (
    GroupNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def join_group(*, invite_code: str, user: User) -> GroupMembership:
    """
    Join an active group using its invite code.

    The code is matched case-insensitively (codes are stored uppercase).
    Uses row-level locking to prevent race conditions when checking
    and creating memberships.

    Args:
        invite_code: Invite code shared by a group member
        user: User joining the group

    Returns:
        Created GroupMembership instance

    Raises:
        InvalidInviteCodeError: If no active group has this code
        AlreadyMemberError: If user is already a member
    """
    code = (invite_code or '').strip().upper()

    try:
        group = (
            Group.objects
            .select_for_update()
            .get(invite_code=code, is_active=True)
        )
    except Group.DoesNotExist:
        raise InvalidInviteCodeError("Invalid invite code")

    if group.has_member(user):
        raise AlreadyMemberError(f"Already a member of {group.name}")

    try:
        membership = GroupMembership.objects.create(
            user=user,
            group=group,
            role=GroupRole.MEMBER
        )
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError(f"Already a member of {group.name}")

    logger.info("User %s joined group %s", user.id, group.id)
    return membership


@transaction.atomic
def leave_group(*, group_id: UUID, user: User) -> Group:
    """
    Leave a group.

    When the last member leaves, the group is deactivated rather than
    deleted so its ledger stays intact.

    Args:
        group_id: UUID of the group
        user: User leaving the group

    Returns:
        The group after the membership change

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    try:
        membership = (
            GroupMembership.objects
            .select_for_update()
            .get(user=user, group=group)
        )
    except GroupMembership.DoesNotExist:
        raise NotMemberError(f"User is not a member of {group.name}")

    membership.delete()

    if not group.memberships.exists():
        group.is_active = False
        group.save(update_fields=['is_active', 'updated_at'])
        logger.info("Group %s deactivated after last member left", group.id)

    return group


def get_group_members(*, group_id: UUID) -> QuerySet[GroupMembership]:
    """
    Get all members of a group in join order.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('joined_at')
    )
