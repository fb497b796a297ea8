"""
Insights Module
================

Month-over-month spending insights for a user's personal expenses.

Classes:
    InsightsEngine: Static methods computing month totals and insights.

Rules:
    - Overall change vs. previous month (only when last month had spending)
    - Categories that grew by more than 10% vs. previous month
    - Highest spending category of the current month
    - Budgets that are used up (danger) or at 80% or more (warning)

Example:
    Getting insights for the current month::

        from apps.analytics.insights import InsightsEngine

        report = InsightsEngine.compute_insights(user_id=user.id)
        for insight in report['insights']:
            print(insight['type'], insight['message'])

Note:
    The rules live in ``build_insights``, which works on plain dicts and
    does not touch the database.
"""

import calendar
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db.models import Sum, Count
from django.utils import timezone

from apps.expenses.models import Expense, Budget, OVERALL_BUDGET
from .exceptions import InvalidPeriodError

ZERO = Decimal('0.00')
ONE_DECIMAL = Decimal('0.1')


def _percent(value: Decimal) -> Decimal:
    return value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


class InsightsEngine:
    """
    Spending insights from personal expenses and budgets.

    Methods:
        month_bounds: First and last day of a calendar month.
        previous_month: (year, month) before the given one.
        category_totals: Per-category totals for a date range.
        build_insights: Apply the insight rules to month totals.
        compute_insights: Full report for a user.
    """

    @staticmethod
    def month_bounds(year: int, month: int) -> tuple[date, date]:
        """
        Inclusive date range of a calendar month.

        Raises:
            InvalidPeriodError: If month is not 1-12 or year is out of range
        """
        if not 1 <= month <= 12:
            raise InvalidPeriodError(f"Invalid month: {month}")
        if not date.min.year <= year <= date.max.year:
            raise InvalidPeriodError(f"Invalid year: {year}")
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last_day)

    @staticmethod
    def previous_month(year: int, month: int) -> tuple[int, int]:
        """January rolls back to December of the previous year."""
        if month == 1:
            return year - 1, 12
        return year, month - 1

    @staticmethod
    def category_totals(user_id, start_date: date, end_date: date) -> list[dict]:
        """
        Sum a user's expenses per category within an inclusive range.

        Returns:
            List of {'category', 'total', 'count'} ordered by category
        """
        rows = (
            Expense.objects
            .filter(user_id=user_id, date__gte=start_date, date__lte=end_date)
            .values('category')
            .annotate(total=Sum('amount'), count=Count('id'))
            .order_by('category')
        )
        return [
            {'category': row['category'], 'total': row['total'], 'count': row['count']}
            for row in rows
        ]

    @staticmethod
    def build_insights(
        current: list[dict],
        previous: list[dict],
        budgets: list[dict],
        warning_percent=80,
        increase_percent=10
    ) -> list[dict]:
        """
        Apply the insight rules.

        Args:
            current: Current month category totals, in aggregation order
            previous: Previous month category totals
            budgets: List of {'category', 'limit'} for the current month
            warning_percent: Budget usage that triggers a warning
            increase_percent: Category growth that triggers an info insight

        Returns:
            List of insight dicts with 'type', 'message', 'value' and,
            where relevant, 'category', 'percent', 'limit', 'overage'
        """
        insights = []

        current_total = sum((c['total'] for c in current), ZERO)
        previous_total = sum((p['total'] for p in previous), ZERO)

        # Overall comparison
        if previous_total > 0:
            percent = _percent(abs((current_total - previous_total) / previous_total * 100))
            if current_total > previous_total:
                insights.append({
                    'type': 'warning',
                    'message': f"You spent {percent}% more this month compared to last month",
                    'value': current_total - previous_total,
                    'percent': percent,
                })
            elif current_total < previous_total:
                insights.append({
                    'type': 'success',
                    'message': f"Great! You saved {percent}% this month compared to last month",
                    'value': previous_total - current_total,
                    'percent': percent,
                })

        # Category comparisons
        previous_by_category = {p['category']: p['total'] for p in previous}
        for item in current:
            previous_cat_total = previous_by_category.get(item['category'], ZERO)
            if previous_cat_total <= 0 or item['total'] <= previous_cat_total:
                continue

            percent = _percent((item['total'] - previous_cat_total) / previous_cat_total * 100)
            if percent > increase_percent:
                insights.append({
                    'type': 'info',
                    'message': f"You spent {percent}% more on {item['category']} this month",
                    'category': item['category'],
                    'value': item['total'] - previous_cat_total,
                    'percent': percent,
                })

        # Highest spending category; ties go to the first in order
        if current:
            highest = current[0]
            for item in current[1:]:
                if item['total'] > highest['total']:
                    highest = item
            insights.append({
                'type': 'info',
                'message': f"{highest['category']} is your highest expense category this month",
                'category': highest['category'],
                'value': highest['total'],
            })

        # Budget warnings
        current_by_category = {c['category']: c['total'] for c in current}
        for budget in budgets:
            category = budget['category']
            limit = budget['limit']
            if limit <= 0:
                continue
            if category == OVERALL_BUDGET:
                spent = current_total
            else:
                spent = current_by_category.get(category, ZERO)
            percent = _percent(spent / limit * 100)

            if spent >= limit:
                overage = spent - limit
                insights.append({
                    'type': 'danger',
                    'message': f"You've exceeded your {category} budget by {overage:.2f}",
                    'category': category,
                    'value': spent,
                    'limit': limit,
                    'overage': overage,
                    'percent': percent,
                })
            elif percent >= warning_percent:
                insights.append({
                    'type': 'warning',
                    'message': f"You've used {percent}% of your {category} budget",
                    'category': category,
                    'value': spent,
                    'limit': limit,
                    'percent': percent,
                })

        return insights

    @staticmethod
    def compute_insights(user_id, now=None) -> dict:
        """
        Build the insights report for the month containing ``now``.

        Args:
            user_id: UUID of the user
            now: date or datetime, defaults to today

        Returns:
            Dictionary containing:
                - current_month: {'year', 'month', 'total', 'by_category'}
                - previous_month: {'year', 'month', 'total', 'by_category'}
                - insights: list of insight dicts
        """
        if now is None:
            today = timezone.localdate()
        elif isinstance(now, datetime):
            today = now.date()
        else:
            today = now

        year, month = today.year, today.month
        prev_year, prev_month = InsightsEngine.previous_month(year, month)

        current = InsightsEngine.category_totals(
            user_id, *InsightsEngine.month_bounds(year, month)
        )
        previous = InsightsEngine.category_totals(
            user_id, *InsightsEngine.month_bounds(prev_year, prev_month)
        )
        budgets = [
            {'category': b.category, 'limit': b.limit}
            for b in Budget.objects.filter(user_id=user_id, month=month, year=year).order_by('category')
        ]

        insights = InsightsEngine.build_insights(
            current,
            previous,
            budgets,
            warning_percent=settings.INSIGHTS_BUDGET_WARNING_PERCENT,
            increase_percent=settings.INSIGHTS_CATEGORY_INCREASE_PERCENT,
        )

        return {
            'current_month': {
                'year': year,
                'month': month,
                'total': sum((c['total'] for c in current), ZERO),
                'by_category': current,
            },
            'previous_month': {
                'year': prev_year,
                'month': prev_month,
                'total': sum((p['total'] for p in previous), ZERO),
                'by_category': previous,
            },
            'insights': insights,
        }
