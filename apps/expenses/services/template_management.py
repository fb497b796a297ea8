"""
Expense template service.

Templates hold the fields of an expense the user records again and
again. Using a template creates a regular expense and bumps the
template's usage stats; frequently used templates are offered first.
"""

import logging
from datetime import date as date_type
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.expenses.models import Expense, Template

from .exceptions import TemplateNotFoundError
from .expense_management import create_expense

logger = logging.getLogger(__name__)

TEMPLATE_FIELDS = ('name', 'amount', 'category', 'payment_method', 'description', 'icon')
FREQUENT_TEMPLATE_LIMIT = 5


def list_templates(*, user: User) -> QuerySet[Template]:
    """Most used first, then newest."""
    return Template.objects.filter(user=user).order_by('-usage_count', '-created_at')


def list_frequent_templates(*, user: User, limit: int = FREQUENT_TEMPLATE_LIMIT) -> QuerySet[Template]:
    """Templates used at least once, most used first."""
    return (
        Template.objects
        .filter(user=user, usage_count__gt=0)
        .order_by('-usage_count', '-last_used')[:limit]
    )


def get_template(*, template_id: UUID, user: User) -> Template:
    """
    Raises:
        TemplateNotFoundError: If template doesn't exist or isn't the user's
    """
    try:
        return Template.objects.get(id=template_id, user=user)
    except Template.DoesNotExist:
        raise TemplateNotFoundError(f"Template with ID {template_id} not found")


def create_template(*, user: User, **fields) -> Template:
    data = {key: fields[key] for key in TEMPLATE_FIELDS if fields.get(key) is not None}
    if not data.get('icon'):
        data.pop('icon', None)

    template = Template.objects.create(user=user, **data)
    logger.info("Template %s created for user %s", template.id, user.id)
    return template


@transaction.atomic
def update_template(*, template_id: UUID, user: User, **fields) -> Template:
    """
    Update a template; omitted fields keep their value.

    Raises:
        TemplateNotFoundError: If template doesn't exist or isn't the user's
    """
    try:
        template = Template.objects.select_for_update().get(id=template_id, user=user)
    except Template.DoesNotExist:
        raise TemplateNotFoundError(f"Template with ID {template_id} not found")

    update_fields = ['updated_at']
    for key in TEMPLATE_FIELDS:
        if fields.get(key) is None:
            continue
        # Blank descriptions are allowed, blank icons are not
        if key == 'icon' and not fields[key]:
            continue
        setattr(template, key, fields[key])
        update_fields.append(key)

    template.save(update_fields=update_fields)
    return template


def delete_template(*, template_id: UUID, user: User) -> None:
    """
    Raises:
        TemplateNotFoundError: If template doesn't exist or isn't the user's
    """
    deleted, _ = Template.objects.filter(id=template_id, user=user).delete()
    if not deleted:
        raise TemplateNotFoundError(f"Template with ID {template_id} not found")
    logger.info("Template %s deleted by user %s", template_id, user.id)


@transaction.atomic
def use_template(
    *,
    template_id: UUID,
    user: User,
    amount: Optional[Decimal] = None,
    description: Optional[str] = None,
    date: Optional[date_type] = None
) -> tuple[Expense, Template]:
    """
    Record an expense from a template.

    Amount, description and date may be overridden for this one expense;
    category and payment method always come from the template.

    Returns:
        Tuple of (expense, template) with refreshed usage stats

    Raises:
        TemplateNotFoundError: If template doesn't exist or isn't the user's
    """
    try:
        template = Template.objects.select_for_update().get(id=template_id, user=user)
    except Template.DoesNotExist:
        raise TemplateNotFoundError(f"Template with ID {template_id} not found")

    expense = create_expense(
        user=user,
        amount=amount or template.amount,
        category=template.category,
        payment_method=template.payment_method,
        description=description or template.description,
        date=date,
    )

    Template.objects.filter(id=template.id).update(
        usage_count=F('usage_count') + 1,
        last_used=timezone.now(),
    )
    template.refresh_from_db(fields=['usage_count', 'last_used'])

    logger.info(
        "Template %s used by user %s (expense %s, %d uses)",
        template.id, user.id, expense.id, template.usage_count
    )
    return expense, template
