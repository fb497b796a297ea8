"""
Budget management service.

One budget per user, category and month; saving a budget for an
existing slot replaces its limit.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.expenses.models import Budget

from .exceptions import BudgetNotFoundError

logger = logging.getLogger(__name__)


def list_budgets(
    *,
    user: User,
    month: Optional[int] = None,
    year: Optional[int] = None
) -> QuerySet[Budget]:
    """Get the user's budgets, optionally for one month/year."""
    queryset = Budget.objects.filter(user=user)
    if month:
        queryset = queryset.filter(month=month)
    if year:
        queryset = queryset.filter(year=year)
    return queryset


def upsert_budget(
    *,
    user: User,
    category: str,
    limit: Decimal,
    month: int,
    year: int
) -> tuple[Budget, bool]:
    """
    Create a budget or update the limit of the existing one.

    Returns:
        Tuple of (budget, created)
    """
    try:
        with transaction.atomic():
            budget, created = Budget.objects.select_for_update().get_or_create(
                user=user,
                category=category,
                month=month,
                year=year,
                defaults={'limit': limit},
            )
    except IntegrityError:
        # Concurrent insert for the same slot; update the winner instead
        budget = Budget.objects.get(user=user, category=category, month=month, year=year)
        created = False

    if not created:
        budget.limit = limit
        budget.save(update_fields=['limit', 'updated_at'])

    logger.info(
        "Budget %s %s for user %s: %s/%s %s",
        budget.id, 'created' if created else 'updated', user.id, month, year, category
    )
    return budget, created


def delete_budget(*, budget_id: UUID, user: User) -> None:
    """
    Raises:
        BudgetNotFoundError: If budget doesn't exist or isn't the user's
    """
    deleted, _ = Budget.objects.filter(id=budget_id, user=user).delete()
    if not deleted:
        raise BudgetNotFoundError(f"Budget with ID {budget_id} not found")
