"""
Personal expense management service.
"""

import logging
from datetime import date as date_type
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Avg, Count, F, QuerySet, Sum
from django.db.models.functions import TruncDay, TruncMonth
from django.utils import timezone

from apps.accounts.models import User
from apps.expenses.models import Expense

from .exceptions import ExpenseNotFoundError

logger = logging.getLogger(__name__)

EXPENSE_FIELDS = ('amount', 'category', 'payment_method', 'description', 'date')


def list_expenses(
    *,
    user: User,
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None,
    category: Optional[str] = None,
    payment_method: Optional[str] = None
) -> QuerySet[Expense]:
    """Get the user's expenses, newest first, with optional filters."""
    queryset = Expense.objects.filter(user=user)

    if start_date:
        queryset = queryset.filter(date__gte=start_date)
    if end_date:
        queryset = queryset.filter(date__lte=end_date)
    if category:
        queryset = queryset.filter(category=category)
    if payment_method:
        queryset = queryset.filter(payment_method=payment_method)

    return queryset.order_by('-date', '-created_at')


def get_expense(*, expense_id: UUID, user: User) -> Expense:
    """
    Raises:
        ExpenseNotFoundError: If expense doesn't exist or isn't the user's
    """
    try:
        return Expense.objects.get(id=expense_id, user=user)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")


def create_expense(*, user: User, **fields) -> Expense:
    """Create a personal expense. Date defaults to today."""
    data = {key: fields[key] for key in EXPENSE_FIELDS if fields.get(key) is not None}
    data.setdefault('date', timezone.localdate())

    expense = Expense.objects.create(user=user, **data)
    logger.info("Expense %s created for user %s", expense.id, user.id)
    return expense


@transaction.atomic
def update_expense(*, expense_id: UUID, user: User, **fields) -> Expense:
    """
    Update an expense; fields that are not given keep their value.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist or isn't the user's
    """
    try:
        expense = Expense.objects.select_for_update().get(id=expense_id, user=user)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    update_fields = ['updated_at']
    for key in EXPENSE_FIELDS:
        if key in fields and fields[key] is not None:
            setattr(expense, key, fields[key])
            update_fields.append(key)

    expense.save(update_fields=update_fields)
    return expense


def delete_expense(*, expense_id: UUID, user: User) -> None:
    """
    Raises:
        ExpenseNotFoundError: If expense doesn't exist or isn't the user's
    """
    expense = get_expense(expense_id=expense_id, user=user)
    expense.delete()
    logger.info("Expense %s deleted by user %s", expense_id, user.id)


@transaction.atomic
def sync_expenses(*, user: User, expenses: list[dict]) -> list[Expense]:
    """
    Store a batch of expenses recorded offline.

    The batch is all-or-nothing.
    """
    created = [create_expense(user=user, **item) for item in expenses]
    logger.info("Synced %d offline expenses for user %s", len(created), user.id)
    return created


def aggregate_expenses(
    *,
    user: User,
    group_by: str = 'category',
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None
) -> list[dict]:
    """
    Sum the user's expenses by category, day or month.

    Returns:
        List of {'key', 'total', 'count', 'avg_amount'} sorted by key.
        Day keys are 'YYYY-MM-DD', month keys 'YYYY-MM'.
    """
    queryset = list_expenses(user=user, start_date=start_date, end_date=end_date)

    if group_by == 'day':
        queryset = queryset.annotate(bucket=TruncDay('date'))
        key_format = '%Y-%m-%d'
    elif group_by == 'month':
        queryset = queryset.annotate(bucket=TruncMonth('date'))
        key_format = '%Y-%m'
    else:
        queryset = queryset.annotate(bucket=F('category'))
        key_format = None

    rows = (
        queryset
        .order_by()
        .values('bucket')
        .annotate(total=Sum('amount'), count=Count('id'), avg_amount=Avg('amount'))
        .order_by('bucket')
    )

    return [
        {
            'key': row['bucket'].strftime(key_format) if key_format else row['bucket'],
            'total': row['total'],
            'count': row['count'],
            'avg_amount': Decimal(str(row['avg_amount'])).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP),
        }
        for row in rows
    ]
