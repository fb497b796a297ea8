"""
Balance aggregation.

Replays a group's ledger into per-member balances. Balances are never
stored; every call recomputes them from the expenses and their splits.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Sequence
from uuid import UUID

from apps.groups.models import GroupMembership
from apps.ledger.models import GroupExpense

from .split_calculation import SplitLine

ZERO = Decimal('0.00')


@dataclass
class Balance:
    """Net position of one member. Positive net means the member is owed."""
    user_id: Any
    paid: Decimal = ZERO
    owes: Decimal = ZERO
    user: Any = field(default=None, compare=False, repr=False)

    @property
    def net_balance(self) -> Decimal:
        return self.paid - self.owes


@dataclass(frozen=True)
class LedgerEntry:
    """Database-independent view of a GroupExpense."""
    payer_id: Any
    amount: Decimal
    splits: Sequence[SplitLine]


def aggregate_balances(member_ids: Sequence, entries: Iterable[LedgerEntry]) -> dict:
    """
    Fold ledger entries into balances for the given members.

    The payer's paid total grows by the full expense amount; every unpaid
    split adds to its user's owes. Payers and split users who are no
    longer members are skipped.

    Returns:
        dict of user_id -> Balance, in member order
    """
    balances = {user_id: Balance(user_id=user_id) for user_id in member_ids}

    for entry in entries:
        payer = balances.get(entry.payer_id)
        if payer is not None:
            payer.paid += entry.amount

        for split in entry.splits:
            if split.is_paid:
                continue
            debtor = balances.get(split.user_id)
            if debtor is not None:
                debtor.owes += split.amount

    return balances


def ledger_entries(expenses: Iterable[GroupExpense]) -> list[LedgerEntry]:
    """Convert GroupExpense instances (splits prefetched) to ledger entries."""
    return [
        LedgerEntry(
            payer_id=expense.paid_by_id,
            amount=expense.amount,
            splits=[
                SplitLine(user_id=s.user_id, amount=s.amount, is_paid=s.is_paid)
                for s in expense.splits.all()
            ],
        )
        for expense in expenses
    ]


def compute_balances(*, group_id: UUID) -> dict:
    """
    Compute balances for every current member of a group.

    Returns:
        dict of user_id -> Balance (with ``user`` set), in join order
    """
    memberships = list(
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('joined_at')
    )
    expenses = (
        GroupExpense.objects
        .filter(group_id=group_id)
        .prefetch_related('splits')
    )

    balances = aggregate_balances(
        [m.user_id for m in memberships],
        ledger_entries(expenses),
    )
    for membership in memberships:
        balances[membership.user_id].user = membership.user

    return balances
