"""
Split calculation.

Turns an expense amount and a split policy into per-participant split
lines. Pure functions: no database access, participants are user ids.

Example:
    100.00 split equally among three members::

        >>> lines = compute_splits(
        ...     amount=Decimal('100.00'),
        ...     split_type='equal',
        ...     payer_id=alice,
        ...     member_ids=[alice, bob, carol],
        ... )
        >>> [line.amount for line in lines]
        [Decimal('33.33'), Decimal('33.33'), Decimal('33.33')]
        >>> [line.is_paid for line in lines]
        [True, False, False]

    The remainder of 0.01 is not redistributed.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Sequence

from apps.ledger.models import SplitType

from .exceptions import (
    InvalidSplitPolicyError,
    EmptyParticipantSetError,
    SplitSumMismatchError,
)

CENT = Decimal('0.01')
HUNDRED = Decimal('100')
SUM_TOLERANCE = Decimal('0.01')


@dataclass(frozen=True)
class SplitLine:
    """A participant's computed share."""
    user_id: Any
    amount: Decimal
    is_paid: bool = False


def to_decimal(value) -> Decimal:
    """Convert int/str/float/Decimal to Decimal without float artifacts."""
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidSplitPolicyError(f"Invalid numeric value: {value!r}")

    if not result.is_finite():
        raise InvalidSplitPolicyError(f"Invalid numeric value: {value!r}")
    return result


def round_money(value) -> Decimal:
    """Round to 2 decimal places, half up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_splits(
    *,
    amount,
    split_type: str,
    payer_id,
    member_ids: Sequence,
    selected_members: Optional[Iterable] = None,
    splits: Optional[Sequence[dict]] = None,
    strict: bool = True
) -> list[SplitLine]:
    """
    Compute split lines for an expense.

    Args:
        amount: Expense total
        split_type: 'equal', 'exact' or 'percentage'
        payer_id: User id of the payer; their line is pre-marked paid
        member_ids: Current group member ids in membership order
        selected_members: Equal split only. Subset of members to split
            among; ids that are not members are ignored. Empty or None
            means all members.
        splits: Exact/percentage only. List of {'user', 'amount'} or
            {'user', 'percentage'} dicts, in output order.
        strict: Require exact amounts to sum to the total and percentages
            to sum to 100 (both within 0.01)

    Returns:
        List of SplitLine, one per participant

    Raises:
        InvalidSplitPolicyError: Unknown split type or malformed entries
        EmptyParticipantSetError: Equal split with no participants
        SplitSumMismatchError: Strict mode and the parts don't add up
    """
    amount = to_decimal(amount)

    if split_type == SplitType.EQUAL:
        lines = _equal_split(amount, member_ids, selected_members)
    elif split_type == SplitType.EXACT:
        lines = _exact_split(amount, member_ids, splits, strict)
    elif split_type == SplitType.PERCENTAGE:
        lines = _percentage_split(amount, member_ids, splits, strict)
    else:
        raise InvalidSplitPolicyError(f"Unknown split type: {split_type!r}")

    return [
        SplitLine(user_id=user_id, amount=share, is_paid=(user_id == payer_id))
        for user_id, share in lines
    ]


def _equal_split(amount, member_ids, selected_members):
    if selected_members:
        selected = set(selected_members)
        participants = [m for m in member_ids if m in selected]
    else:
        participants = list(member_ids)

    if not participants:
        raise EmptyParticipantSetError("No participants to split the expense among")

    share = round_money(amount / len(participants))
    return [(user_id, share) for user_id in participants]


def _exact_split(amount, member_ids, splits, strict):
    entries = _validated_entries(splits, member_ids, 'amount')

    if strict:
        total = sum((value for _, value in entries), Decimal('0'))
        if abs(total - amount) > SUM_TOLERANCE:
            raise SplitSumMismatchError(
                f"Split amounts add up to {total}, expected {amount}"
            )

    return [(user_id, round_money(value)) for user_id, value in entries]


def _percentage_split(amount, member_ids, splits, strict):
    entries = _validated_entries(splits, member_ids, 'percentage')

    if strict:
        total = sum((value for _, value in entries), Decimal('0'))
        if abs(total - HUNDRED) > SUM_TOLERANCE:
            raise SplitSumMismatchError(
                f"Percentages add up to {total}, expected 100"
            )

    return [
        (user_id, round_money(amount * value / HUNDRED))
        for user_id, value in entries
    ]


def _validated_entries(splits, member_ids, key):
    """Structural checks shared by exact and percentage splits."""
    if not splits:
        raise InvalidSplitPolicyError("At least one split entry is required")

    members = set(member_ids)
    seen = set()
    entries = []

    for entry in splits:
        user_id = entry.get('user')
        if user_id is None or entry.get(key) is None:
            raise InvalidSplitPolicyError(f"Each split needs 'user' and '{key}'")
        if user_id in seen:
            raise InvalidSplitPolicyError(f"User {user_id} appears more than once")
        if user_id not in members:
            raise InvalidSplitPolicyError(f"User {user_id} is not a group member")

        value = to_decimal(entry[key])
        if value < 0:
            raise InvalidSplitPolicyError(f"Split {key} cannot be negative")

        seen.add(user_id)
        entries.append((user_id, value))

    return entries
