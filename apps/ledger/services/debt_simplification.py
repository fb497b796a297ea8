"""
Debt simplification.

Reduces net balances to a short list of transfers using a greedy
two-pointer match between the largest debtor and the largest creditor.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from .split_calculation import round_money

THRESHOLD = Decimal('0.01')


@dataclass(frozen=True)
class Debt:
    """from_user_id should pay to_user_id the given amount."""
    from_user_id: Any
    to_user_id: Any
    amount: Decimal


def simplify_debts(balances: Sequence) -> list[Debt]:
    """
    Compute transfers that settle the given balances.

    Args:
        balances: Objects with ``user_id`` and ``net_balance``, in member
            order. They are not modified.

    Returns:
        List of Debt, at most one fewer than the number of non-zero
        balances. Transfers of 0.01 or less are not emitted.
    """
    debtors = [[b.user_id, b.net_balance] for b in balances if b.net_balance < 0]
    creditors = [[b.user_id, b.net_balance] for b in balances if b.net_balance > 0]

    # Stable sorts: ties keep member order
    debtors.sort(key=lambda item: item[1])
    creditors.sort(key=lambda item: item[1], reverse=True)

    debts = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(-debtor[1], creditor[1])
        if amount > THRESHOLD:
            debts.append(Debt(
                from_user_id=debtor[0],
                to_user_id=creditor[0],
                amount=round_money(amount),
            ))

        debtor[1] += amount
        creditor[1] -= amount

        if abs(debtor[1]) < THRESHOLD:
            i += 1
        if abs(creditor[1]) < THRESHOLD:
            j += 1

    return debts
