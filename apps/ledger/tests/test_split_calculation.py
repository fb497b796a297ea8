"""
Unit tests for split calculation.

Pure functions, no database access.
"""

import pytest
from decimal import Decimal

from apps.ledger.services.split_calculation import compute_splits, round_money
from apps.ledger.services.exceptions import (
    InvalidSplitPolicyError,
    EmptyParticipantSetError,
    SplitSumMismatchError,
)

A, B, C, D = 'alice', 'bob', 'carol', 'dave'
MEMBERS = [A, B, C]


class TestRoundMoney:

    def test_rounds_half_up(self):
        assert round_money(Decimal('0.005')) == Decimal('0.01')
        assert round_money(Decimal('2.675')) == Decimal('2.68')

    def test_accepts_floats_without_artifacts(self):
        assert round_money(0.1 + 0.2) == Decimal('0.30')


class TestEqualSplit:

    def test_three_way_split_of_100(self):
        lines = compute_splits(
            amount=Decimal('100.00'),
            split_type='equal',
            payer_id=A,
            member_ids=MEMBERS,
        )

        assert [line.user_id for line in lines] == MEMBERS
        assert [line.amount for line in lines] == [Decimal('33.33')] * 3
        assert [line.is_paid for line in lines] == [True, False, False]

    def test_remainder_is_not_redistributed(self):
        lines = compute_splits(
            amount=Decimal('100.00'), split_type='equal', payer_id=A, member_ids=MEMBERS
        )

        assert sum(line.amount for line in lines) == Decimal('99.99')

    @pytest.mark.parametrize('amount,count', [
        ('100.00', 3),
        ('10.00', 7),
        ('0.05', 2),
        ('999.99', 6),
    ])
    def test_sum_within_half_cent_per_participant(self, amount, count):
        members = [f'user{i}' for i in range(count)]
        lines = compute_splits(
            amount=Decimal(amount), split_type='equal', payer_id='user0', member_ids=members
        )

        total = sum(line.amount for line in lines)
        assert abs(total - Decimal(amount)) <= count * Decimal('0.005')

    def test_selected_members_keep_membership_order(self):
        lines = compute_splits(
            amount=Decimal('50.00'),
            split_type='equal',
            payer_id=B,
            member_ids=MEMBERS,
            selected_members=[C, A],
        )

        assert [line.user_id for line in lines] == [A, C]
        assert [line.amount for line in lines] == [Decimal('25.00')] * 2
        # Payer not among participants, so nobody is pre-paid
        assert not any(line.is_paid for line in lines)

    def test_selected_non_members_are_ignored(self):
        lines = compute_splits(
            amount=Decimal('30.00'),
            split_type='equal',
            payer_id=A,
            member_ids=MEMBERS,
            selected_members=[A, D],
        )

        assert [(line.user_id, line.amount) for line in lines] == [(A, Decimal('30.00'))]

    def test_only_non_members_selected(self):
        with pytest.raises(EmptyParticipantSetError):
            compute_splits(
                amount=Decimal('30.00'),
                split_type='equal',
                payer_id=A,
                member_ids=MEMBERS,
                selected_members=[D],
            )

    def test_no_members(self):
        with pytest.raises(EmptyParticipantSetError):
            compute_splits(amount=Decimal('30.00'), split_type='equal', payer_id=A, member_ids=[])


class TestExactSplit:

    def test_exact_amounts(self):
        lines = compute_splits(
            amount=Decimal('100.00'),
            split_type='exact',
            payer_id=A,
            member_ids=MEMBERS,
            splits=[{'user': B, 'amount': '60.00'}, {'user': A, 'amount': '40.00'}],
        )

        assert [(l.user_id, l.amount, l.is_paid) for l in lines] == [
            (B, Decimal('60.00'), False),
            (A, Decimal('40.00'), True),
        ]

    def test_sum_mismatch_rejected_in_strict_mode(self):
        with pytest.raises(SplitSumMismatchError):
            compute_splits(
                amount=Decimal('100.00'),
                split_type='exact',
                payer_id=A,
                member_ids=MEMBERS,
                splits=[{'user': A, 'amount': '10'}, {'user': B, 'amount': '10'}],
            )

    def test_sum_within_tolerance_accepted(self):
        lines = compute_splits(
            amount=Decimal('100.00'),
            split_type='exact',
            payer_id=A,
            member_ids=MEMBERS,
            splits=[{'user': A, 'amount': '50.00'}, {'user': B, 'amount': '49.99'}],
        )

        assert len(lines) == 2

    def test_sum_mismatch_accepted_when_not_strict(self):
        lines = compute_splits(
            amount=Decimal('100.00'),
            split_type='exact',
            payer_id=A,
            member_ids=MEMBERS,
            splits=[{'user': A, 'amount': '10'}, {'user': B, 'amount': '10'}],
            strict=False,
        )

        assert sum(line.amount for line in lines) == Decimal('20.00')

    def test_empty_splits(self):
        with pytest.raises(InvalidSplitPolicyError):
            compute_splits(
                amount=Decimal('10'), split_type='exact', payer_id=A, member_ids=MEMBERS, splits=[]
            )

    def test_duplicate_user(self):
        with pytest.raises(InvalidSplitPolicyError):
            compute_splits(
                amount=Decimal('10'),
                split_type='exact',
                payer_id=A,
                member_ids=MEMBERS,
                splits=[{'user': A, 'amount': '5'}, {'user': A, 'amount': '5'}],
            )

    def test_non_member(self):
        with pytest.raises(InvalidSplitPolicyError):
            compute_splits(
                amount=Decimal('10'),
                split_type='exact',
                payer_id=A,
                member_ids=MEMBERS,
                splits=[{'user': D, 'amount': '10'}],
            )

    def test_negative_amount(self):
        with pytest.raises(InvalidSplitPolicyError):
            compute_splits(
                amount=Decimal('10'),
                split_type='exact',
                payer_id=A,
                member_ids=MEMBERS,
                splits=[{'user': A, 'amount': '15'}, {'user': B, 'amount': '-5'}],
                strict=False,
            )

    def test_structural_checks_apply_when_not_strict(self):
        with pytest.raises(InvalidSplitPolicyError):
            compute_splits(
                amount=Decimal('10'),
                split_type='exact',
                payer_id=A,
                member_ids=MEMBERS,
                splits=[{'user': D, 'amount': '10'}],
                strict=False,
            )

    def test_missing_amount(self):
        with pytest.raises(InvalidSplitPolicyError):
            compute_splits(
                amount=Decimal('10'),
                split_type='exact',
                payer_id=A,
                member_ids=MEMBERS,
                splits=[{'user': A}],
            )

    def test_non_numeric_amount(self):
        with pytest.raises(InvalidSplitPolicyError):
            compute_splits(
                amount=Decimal('10'),
                split_type='exact',
                payer_id=A,
                member_ids=MEMBERS,
                splits=[{'user': A, 'amount': 'NaN'}],
            )


class TestPercentageSplit:

    def test_percentages(self):
        lines = compute_splits(
            amount=Decimal('200.00'),
            split_type='percentage',
            payer_id=C,
            member_ids=MEMBERS,
            splits=[
                {'user': A, 'percentage': '50'},
                {'user': B, 'percentage': '30'},
                {'user': C, 'percentage': '20'},
            ],
        )

        assert [l.amount for l in lines] == [Decimal('100.00'), Decimal('60.00'), Decimal('40.00')]
        assert [l.is_paid for l in lines] == [False, False, True]

    def test_percentage_amounts_are_rounded(self):
        lines = compute_splits(
            amount=Decimal('10.00'),
            split_type='percentage',
            payer_id=A,
            member_ids=MEMBERS,
            splits=[
                {'user': A, 'percentage': '33.3333'},
                {'user': B, 'percentage': '33.3333'},
                {'user': C, 'percentage': '33.3334'},
            ],
        )

        assert [l.amount for l in lines] == [Decimal('3.33')] * 3

    def test_percentages_must_sum_to_100(self):
        with pytest.raises(SplitSumMismatchError):
            compute_splits(
                amount=Decimal('100'),
                split_type='percentage',
                payer_id=A,
                member_ids=MEMBERS,
                splits=[{'user': A, 'percentage': '50'}, {'user': B, 'percentage': '40'}],
            )

    def test_percentage_mismatch_accepted_when_not_strict(self):
        lines = compute_splits(
            amount=Decimal('100'),
            split_type='percentage',
            payer_id=A,
            member_ids=MEMBERS,
            splits=[{'user': A, 'percentage': '50'}, {'user': B, 'percentage': '40'}],
            strict=False,
        )

        assert [l.amount for l in lines] == [Decimal('50.00'), Decimal('40.00')]


class TestSplitType:

    def test_unknown_split_type(self):
        with pytest.raises(InvalidSplitPolicyError):
            compute_splits(
                amount=Decimal('10'), split_type='shares', payer_id=A, member_ids=MEMBERS
            )
