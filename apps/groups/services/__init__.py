"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)

from .group_management import (
    create_group,
    update_group,
    get_group_by_id,
    get_group_for_member,
    regenerate_invite_code,
)

from .membership_management import (
    join_group,
    leave_group,
    get_group_members,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'InvalidInviteCodeError',
    'AlreadyMemberError',
    'NotMemberError',
    'InsufficientPermissionsError',

    # Group Management
    'create_group',
    'update_group',
    'get_group_by_id',
    'get_group_for_member',
    'regenerate_invite_code',

    # Membership Management
    'join_group',
    'leave_group',
    'get_group_members',
]
