"""
Group expense management service.

Handles ledger writes (expenses, settlements, split payments) and the
read models built on top of the ledger (balances, pending payments).
The ledger is append-only: expenses are never edited or deleted, only
their splits move from unpaid to paid.
"""

import logging
from datetime import date as date_type
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, DatabaseError
from django.db.models import F, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.groups.models import GroupMembership
from apps.groups.services import get_group_for_member
from apps.ledger.models import GroupExpense, Split, SplitType, SETTLEMENT_CATEGORY
from apps.notifications.models import Notification, NotificationType
from apps.notifications.services import get_notification_sink

from .balance_aggregation import compute_balances
from .debt_simplification import simplify_debts
from .split_calculation import compute_splits, round_money, CENT
from .exceptions import (
    InvalidSplitPolicyError,
    InvalidSettlementError,
    ExpenseNotFoundError,
    SplitNotFoundError,
    SplitAlreadyPaidError,
    SplitVersionConflictError,
    NoPendingPaymentsError,
    InsufficientPermissionsError,
    LedgerPersistenceError,
)

logger = logging.getLogger(__name__)


def _member_ids(group) -> list:
    return list(
        GroupMembership.objects
        .filter(group=group)
        .order_by('joined_at')
        .values_list('user_id', flat=True)
    )


def _persist_expense(*, group, payer, amount, description, category, date, split_type, lines):
    """Write an expense and its splits in one transaction."""
    now = timezone.now()
    try:
        with transaction.atomic():
            expense = GroupExpense.objects.create(
                group=group,
                paid_by=payer,
                amount=amount,
                description=description,
                category=category,
                date=date or timezone.localdate(),
                split_type=split_type,
            )
            Split.objects.bulk_create([
                Split(
                    expense=expense,
                    user_id=line.user_id,
                    position=position,
                    amount=line.amount,
                    is_paid=line.is_paid,
                    paid_at=now if line.is_paid else None,
                )
                for position, line in enumerate(lines)
            ])
    except DatabaseError as e:
        logger.exception("Failed to store expense in group %s", group.id)
        raise LedgerPersistenceError("Could not save the expense") from e

    return expense


def add_group_expense(
    *,
    group_id: UUID,
    payer: User,
    amount: Decimal,
    description: str,
    split_type: str = SplitType.EQUAL,
    category: str = 'Other',
    date: Optional[date_type] = None,
    selected_members: Optional[list] = None,
    splits: Optional[list] = None,
    strict: Optional[bool] = None
) -> GroupExpense:
    """
    Add an expense paid by ``payer`` to the group ledger.

    Args:
        group_id: UUID of the group
        payer: User who paid; must be a member
        amount: Expense total (at least 0.01)
        description: What the expense was for
        split_type: 'equal', 'exact' or 'percentage'
        category: Free-form category, defaults to 'Other'
        date: Expense date, defaults to today
        selected_members: Equal split subset (user ids)
        splits: Exact/percentage entries ({'user', 'amount'|'percentage'})
        strict: Override LEDGER_STRICT_SPLIT_VALIDATION

    Returns:
        Created GroupExpense with its splits

    Raises:
        GroupNotFoundError: If group doesn't exist or payer is not a member
        InvalidSplitPolicyError: Malformed amount or split entries
        EmptyParticipantSetError: Equal split with no participants
        SplitSumMismatchError: Strict mode and the split doesn't add up
        LedgerPersistenceError: Database write failed
    """
    group = get_group_for_member(group_id=group_id, user=payer)

    amount = round_money(amount)
    if amount < CENT:
        raise InvalidSplitPolicyError("Amount must be at least 0.01")

    description = (description or '').strip()
    if not description:
        raise InvalidSplitPolicyError("Description is required")

    if strict is None:
        strict = settings.LEDGER_STRICT_SPLIT_VALIDATION

    lines = compute_splits(
        amount=amount,
        split_type=split_type,
        payer_id=payer.id,
        member_ids=_member_ids(group),
        selected_members=selected_members,
        splits=splits,
        strict=strict,
    )

    expense = _persist_expense(
        group=group,
        payer=payer,
        amount=amount,
        description=description,
        category=category or 'Other',
        date=date,
        split_type=split_type,
        lines=lines,
    )

    logger.info(
        "Expense %s of %s added to group %s by %s (%s, %d splits)",
        expense.id, amount, group.id, payer.id, split_type, len(lines)
    )
    return expense


def record_settlement(
    *,
    group_id: UUID,
    from_user: User,
    to_user_id: UUID,
    amount: Decimal
) -> GroupExpense:
    """
    Record that ``from_user`` paid ``to_user_id`` outside the app.

    The settlement is stored as a ledger entry paid by ``from_user`` with a
    single, already paid split for the recipient.

    Raises:
        GroupNotFoundError: If group doesn't exist or user is not a member
        InvalidSettlementError: Non-positive amount, self-settlement or
            recipient outside the group
        LedgerPersistenceError: Database write failed
    """
    group = get_group_for_member(group_id=group_id, user=from_user)

    amount = round_money(amount)
    if amount < CENT:
        raise InvalidSettlementError("Settlement amount must be positive")

    if to_user_id == from_user.id:
        raise InvalidSettlementError("Cannot settle with yourself")

    if to_user_id not in _member_ids(group):
        raise InvalidSettlementError("Recipient is not a member of this group")

    expense = _persist_expense(
        group=group,
        payer=from_user,
        amount=amount,
        description='Settlement',
        category=SETTLEMENT_CATEGORY,
        date=None,
        split_type=SplitType.EXACT,
        lines=compute_splits(
            amount=amount,
            split_type=SplitType.EXACT,
            payer_id=to_user_id,
            member_ids=[to_user_id],
            splits=[{'user': to_user_id, 'amount': amount}],
        ),
    )

    logger.info(
        "Settlement %s: %s paid %s to %s in group %s",
        expense.id, from_user.id, amount, to_user_id, group.id
    )
    return expense


def mark_split_paid(
    *,
    group_id: UUID,
    expense_id: UUID,
    user_id: UUID,
    marked_by: User,
    version: Optional[int] = None,
    notifier=None
) -> GroupExpense:
    """
    Mark one participant's split as paid.

    Only the expense payer or a group admin may confirm a payment. The
    split row is locked for the duration of the transition; when
    ``version`` is given it must match the stored version.

    Args:
        group_id: UUID of the group
        expense_id: UUID of the expense
        user_id: UUID of the participant whose split is paid
        marked_by: User confirming the payment
        version: Split version the caller last saw (optional)
        notifier: Notification sink, defaults to the configured one

    Returns:
        The expense with refreshed splits

    Raises:
        GroupNotFoundError: If group doesn't exist or user is not a member
        ExpenseNotFoundError: If expense isn't in this group
        InsufficientPermissionsError: If user is neither payer nor admin
        SplitNotFoundError: If the expense has no split for user_id
        SplitVersionConflictError: If ``version`` is stale
        SplitAlreadyPaidError: If the split is already paid
    """
    group = get_group_for_member(group_id=group_id, user=marked_by)

    try:
        expense = GroupExpense.objects.select_related('paid_by').get(id=expense_id, group=group)
    except GroupExpense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    if expense.paid_by_id != marked_by.id and not group.is_admin(marked_by):
        raise InsufficientPermissionsError(
            "Only the payer or a group admin can confirm payments"
        )

    try:
        with transaction.atomic():
            try:
                split = (
                    Split.objects
                    .select_for_update()
                    .select_related('user')
                    .get(expense=expense, user_id=user_id)
                )
            except Split.DoesNotExist:
                raise SplitNotFoundError("Split not found for this user")

            if version is not None and split.version != version:
                logger.warning(
                    "Version conflict on split %s: expected %s, found %s",
                    split.id, version, split.version
                )
                raise SplitVersionConflictError(
                    "This payment was updated by someone else. Refresh and try again."
                )

            if split.is_paid:
                raise SplitAlreadyPaidError("Split is already marked as paid")

            split.mark_paid()
    except DatabaseError as e:
        logger.exception("Failed to mark split paid on expense %s", expense.id)
        raise LedgerPersistenceError("Could not update the payment") from e

    logger.info(
        "Split %s on expense %s marked paid by %s",
        split.id, expense.id, marked_by.id
    )

    if split.user_id != marked_by.id:
        sink = notifier or get_notification_sink()
        sink.send(
            user=split.user,
            type=NotificationType.PAYMENT_CONFIRMED,
            title=f"Payment confirmed in {group.name}",
            message=(
                f"{marked_by.get_display_name()} confirmed your payment of "
                f"{split.amount} {split.user.currency} for \"{expense.description}\""
            ),
            data={
                'group_id': str(group.id),
                'expense_id': str(expense.id),
                'amount': str(split.amount),
            },
        )

    return expense


def list_group_expenses(*, group_id: UUID, user: User) -> QuerySet[GroupExpense]:
    """
    Get the group's ledger, newest first.

    Raises:
        GroupNotFoundError: If group doesn't exist or user is not a member
    """
    group = get_group_for_member(group_id=group_id, user=user)

    return (
        GroupExpense.objects
        .filter(group=group)
        .select_related('paid_by')
        .prefetch_related('splits__user')
        .order_by('-date', '-created_at')
    )


def get_balances(*, group_id: UUID, user: User) -> dict:
    """
    Compute balances, simplified debts and the ledger total.

    Returns:
        dict with keys:
            - balances: list of {'user', 'paid', 'owes', 'net_balance'}
            - debts: list of {'from_user', 'to_user', 'amount'}
            - total_expenses: sum of all ledger entries

    Raises:
        GroupNotFoundError: If group doesn't exist or user is not a member
    """
    group = get_group_for_member(group_id=group_id, user=user)

    balances = list(compute_balances(group_id=group.id).values())
    users = {b.user_id: b.user for b in balances}
    debts = simplify_debts(balances)

    total = sum(
        (e.amount for e in GroupExpense.objects.filter(group=group).only('amount')),
        Decimal('0.00')
    )

    return {
        'balances': [
            {
                'user': b.user,
                'paid': b.paid,
                'owes': b.owes,
                'net_balance': b.net_balance,
            }
            for b in balances
        ],
        'debts': [
            {
                'from_user': users[d.from_user_id],
                'to_user': users[d.to_user_id],
                'amount': d.amount,
            }
            for d in debts
        ],
        'total_expenses': total,
    }


def _unpaid_splits(group, user_id=None):
    """Unpaid splits owed to someone else, in ledger order."""
    queryset = (
        Split.objects
        .filter(expense__group=group, is_paid=False)
        .exclude(user_id=F('expense__paid_by_id'))
        .select_related('user', 'expense', 'expense__paid_by')
        .order_by('expense__date', 'expense__created_at', 'position')
    )
    if user_id is not None:
        queryset = queryset.filter(user_id=user_id)
    return queryset


def get_pending_payments(*, group_id: UUID, user: User) -> dict:
    """
    Group unpaid splits by debtor.

    Returns:
        dict of user_id -> {'user', 'total_owed', 'expenses'} where each
        expense item has 'expense_id', 'description', 'amount', 'paid_by'

    Raises:
        GroupNotFoundError: If group doesn't exist or user is not a member
    """
    group = get_group_for_member(group_id=group_id, user=user)

    pending = {}
    for split in _unpaid_splits(group):
        entry = pending.setdefault(split.user_id, {
            'user': split.user,
            'total_owed': Decimal('0.00'),
            'expenses': [],
        })
        entry['total_owed'] += split.amount
        entry['expenses'].append({
            'expense_id': split.expense_id,
            'description': split.expense.description,
            'amount': split.amount,
            'paid_by': split.expense.paid_by,
        })

    return pending


def send_payment_reminder(
    *,
    group_id: UUID,
    from_user: User,
    to_user_id: UUID,
    notifier=None
) -> Notification:
    """
    Remind a member of what they owe in the group.

    Args:
        group_id: UUID of the group
        from_user: Member sending the reminder
        to_user_id: UUID of the member being reminded
        notifier: Notification sink, defaults to the configured one

    Returns:
        The notification produced by the sink

    Raises:
        GroupNotFoundError: If group doesn't exist or user is not a member
        NoPendingPaymentsError: If the target owes nothing in this group
    """
    group = get_group_for_member(group_id=group_id, user=from_user)

    splits = list(_unpaid_splits(group, user_id=to_user_id))
    total = sum((s.amount for s in splits), Decimal('0.00'))
    if total <= 0:
        raise NoPendingPaymentsError("User has no pending payments")

    to_user = splits[0].user
    sink = notifier or get_notification_sink()
    notification = sink.send(
        user=to_user,
        type=NotificationType.PAYMENT_REMINDER,
        title=f"Payment Reminder from {group.name}",
        message=(
            f"{from_user.get_display_name()} is requesting payment of "
            f"{total:,.2f} {to_user.currency} in group \"{group.name}\""
        ),
        data={
            'group_id': str(group.id),
            'amount': str(total),
            'from_user': str(from_user.id),
        },
    )

    logger.info(
        "Payment reminder for %s sent to %s in group %s",
        total, to_user.id, group.id
    )
    return notification
