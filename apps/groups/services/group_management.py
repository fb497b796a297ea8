"""
Group management service.

Handles group creation, lookup, updates and invite codes with proper
transaction safety.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import Prefetch

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole, generate_invite_code

from .exceptions import (
    GroupNotFoundError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


def create_group(
    *,
    name: str,
    creator: User,
    description: str = '',
    icon: str = '',
    max_retries: int = 5
) -> Group:
    """
    Create a new group and add the creator as admin.

    This is a multi-step operation wrapped in a transaction:
    1. Generate unique invite code
    2. Create the group
    3. Create the creator's admin membership

    Args:
        name: Group name (surrounding whitespace is stripped)
        creator: User creating the group
        description: Optional group description
        icon: Optional icon, defaults to the model default
        max_retries: Maximum attempts to generate unique invite code

    Returns:
        Created Group instance

    Raises:
        ValueError: If the name is blank
        RuntimeError: If cannot generate unique invite code after retries
    """
    name = (name or '').strip()
    if not name:
        raise ValueError("Group name is required")

    # Retry logic outside transaction to handle invite code collisions
    for attempt in range(max_retries):
        invite_code = generate_invite_code()

        try:
            # Each attempt is a separate transaction
            with transaction.atomic():
                group = Group(
                    name=name,
                    creator=creator,
                    description=description or '',
                    invite_code=invite_code,
                )
                if icon:
                    group.icon = icon
                group.save()

                GroupMembership.objects.create(
                    user=creator,
                    group=group,
                    role=GroupRole.ADMIN
                )

                logger.info("Group %s created by %s", group.id, creator.id)
                return group

        except IntegrityError:
            # Invite code collision (very rare)
            logger.warning("Invite code collision on attempt %d", attempt + 1)
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

    raise RuntimeError("Unexpected error in group creation")


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with members prefetched.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return (
            Group.objects
            .select_related('creator')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=GroupMembership.objects.select_related('user')
                )
            )
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def get_group_for_member(*, group_id: UUID, user: User) -> Group:
    """
    Get a group the user belongs to.

    Non-members get the same error as for a missing group so that group
    existence is not disclosed.

    Raises:
        GroupNotFoundError: If group doesn't exist or user is not a member
    """
    group = get_group_by_id(group_id=group_id)
    if not group.has_member(user):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")
    return group


@transaction.atomic
def update_group(
    *,
    group_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    icon: Optional[str] = None
) -> Group:
    """
    Update group details (admin only).

    Uses select_for_update to prevent concurrent modifications.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not admin
        ValueError: If a new name is given but blank
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.has_member(user):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(user):
        raise InsufficientPermissionsError("Only group admins can update the group")

    update_fields = ['updated_at']

    if name is not None:
        name = name.strip()
        if not name:
            raise ValueError("Group name is required")
        group.name = name
        update_fields.append('name')

    if description is not None:
        group.description = description
        update_fields.append('description')

    if icon:
        group.icon = icon
        update_fields.append('icon')

    group.save(update_fields=update_fields)

    return group


@transaction.atomic
def regenerate_invite_code(
    *,
    group_id: UUID,
    user: User,
    max_retries: int = 5
) -> str:
    """
    Regenerate a group's invite code (admin only).

    Each attempt runs in a savepoint so a collision does not poison the
    surrounding transaction.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not admin
        RuntimeError: If cannot generate unique code after retries
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(user):
        raise InsufficientPermissionsError("Only group admins can regenerate invite codes")

    for attempt in range(max_retries):
        new_code = generate_invite_code()

        try:
            with transaction.atomic():
                group.invite_code = new_code
                group.save(update_fields=['invite_code', 'updated_at'])
            return new_code
        except IntegrityError:
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

    raise RuntimeError("Unexpected error in invite code generation")
