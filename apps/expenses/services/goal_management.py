"""
Savings goal service.

A goal's current amount is the running sum of its contributions and
never drops below zero. A goal counts as completed while the current
amount reaches the target; changing the target or removing a
contribution can reopen it.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.expenses.models import Goal, GoalContribution

from .exceptions import (
    GoalNotFoundError,
    ContributionNotFoundError,
    InvalidContributionError,
)

logger = logging.getLogger(__name__)

GOAL_FIELDS = ('name', 'target_amount', 'icon', 'color')
ZERO = Decimal('0.00')
CENT = Decimal('0.01')


def list_goals(*, user: User) -> QuerySet[Goal]:
    """Open goals first, newest first within each group."""
    return (
        Goal.objects
        .filter(user=user)
        .prefetch_related('contributions')
        .order_by('is_completed', '-created_at')
    )


def get_goal(*, goal_id: UUID, user: User) -> Goal:
    """
    Raises:
        GoalNotFoundError: If goal doesn't exist or isn't the user's
    """
    try:
        return Goal.objects.prefetch_related('contributions').get(id=goal_id, user=user)
    except Goal.DoesNotExist:
        raise GoalNotFoundError(f"Goal with ID {goal_id} not found")


def _lock_goal(goal_id: UUID, user: User) -> Goal:
    try:
        return Goal.objects.select_for_update().get(id=goal_id, user=user)
    except Goal.DoesNotExist:
        raise GoalNotFoundError(f"Goal with ID {goal_id} not found")


def create_goal(*, user: User, **fields) -> Goal:
    data = {key: fields[key] for key in GOAL_FIELDS if fields.get(key)}
    goal = Goal.objects.create(user=user, deadline=fields.get('deadline'), **data)
    logger.info("Goal %s created for user %s (target %s)", goal.id, user.id, goal.target_amount)
    return goal


@transaction.atomic
def update_goal(*, goal_id: UUID, user: User, **fields) -> Goal:
    """
    Update a goal; omitted fields keep their value.

    Passing ``deadline=None`` explicitly clears the deadline.

    Raises:
        GoalNotFoundError: If goal doesn't exist or isn't the user's
    """
    goal = _lock_goal(goal_id, user)

    update_fields = ['updated_at']
    for key in GOAL_FIELDS:
        if fields.get(key):
            setattr(goal, key, fields[key])
            update_fields.append(key)

    if 'deadline' in fields:
        goal.deadline = fields['deadline']
        update_fields.append('deadline')

    goal.refresh_completion()
    update_fields.append('is_completed')

    goal.save(update_fields=update_fields)
    return get_goal(goal_id=goal.id, user=user)


def delete_goal(*, goal_id: UUID, user: User) -> None:
    """
    Delete a goal together with its contributions.

    Raises:
        GoalNotFoundError: If goal doesn't exist or isn't the user's
    """
    deleted, _ = Goal.objects.filter(id=goal_id, user=user).delete()
    if not deleted:
        raise GoalNotFoundError(f"Goal with ID {goal_id} not found")
    logger.info("Goal %s deleted by user %s", goal_id, user.id)


@transaction.atomic
def add_contribution(
    *,
    goal_id: UUID,
    user: User,
    amount: Decimal,
    note: str = ''
) -> Goal:
    """
    Put money towards a goal.

    Raises:
        GoalNotFoundError: If goal doesn't exist or isn't the user's
        InvalidContributionError: If amount is not positive
    """
    if amount is None or amount <= 0:
        raise InvalidContributionError("Please provide a valid amount")

    goal = _lock_goal(goal_id, user)

    GoalContribution.objects.create(goal=goal, amount=amount, note=note or '')
    goal.current_amount += amount
    goal.refresh_completion()
    goal.save(update_fields=['current_amount', 'is_completed', 'updated_at'])

    logger.info(
        "Contribution of %s to goal %s by user %s (%s/%s)",
        amount, goal.id, user.id, goal.current_amount, goal.target_amount
    )
    return get_goal(goal_id=goal.id, user=user)


@transaction.atomic
def remove_contribution(*, goal_id: UUID, contribution_id: UUID, user: User) -> Goal:
    """
    Take a contribution back out of a goal.

    Raises:
        GoalNotFoundError: If goal doesn't exist or isn't the user's
        ContributionNotFoundError: If the contribution isn't on this goal
    """
    goal = _lock_goal(goal_id, user)

    try:
        contribution = goal.contributions.get(id=contribution_id)
    except GoalContribution.DoesNotExist:
        raise ContributionNotFoundError(f"Contribution with ID {contribution_id} not found")

    goal.current_amount = max(goal.current_amount - contribution.amount, ZERO)
    goal.refresh_completion()
    contribution.delete()
    goal.save(update_fields=['current_amount', 'is_completed', 'updated_at'])

    logger.info("Contribution %s removed from goal %s by user %s", contribution_id, goal.id, user.id)
    return get_goal(goal_id=goal.id, user=user)


def get_goal_summary(*, user: User) -> dict:
    """
    Totals across all of the user's goals.

    Returns:
        Dict with total_goals, completed_goals, active_goals, total_saved,
        total_target and overall_progress (percent, 2 dp; 0 without goals)
    """
    goals = list(Goal.objects.filter(user=user).only('current_amount', 'target_amount', 'is_completed'))

    total_saved = sum((goal.current_amount for goal in goals), ZERO)
    total_target = sum((goal.target_amount for goal in goals), ZERO)
    completed = sum(1 for goal in goals if goal.is_completed)

    if total_target > 0:
        overall_progress = (total_saved / total_target * 100).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        overall_progress = ZERO

    return {
        'total_goals': len(goals),
        'completed_goals': completed,
        'active_goals': len(goals) - completed,
        'total_saved': total_saved,
        'total_target': total_target,
        'overall_progress': overall_progress,
    }
