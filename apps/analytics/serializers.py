"""
Serializers for analytics app.

Input Serializers:
    InsightsQuerySerializer - Validates the optional month period

Response Serializers:
    InsightsReportSerializer - Month totals and insights
"""

from datetime import date
from rest_framework import serializers

MIN_PERIOD_YEAR = 2


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class InsightsQuerySerializer(serializers.Serializer):
    """
    Validate the insights query parameters.

    Query Parameters:
        period (str): Month in YYYY-MM format; defaults to the current month
    """

    period = serializers.RegexField(
        regex=r'^\d{4}-(0[1-9]|1[0-2])$',
        required=False,
        allow_blank=True,
        help_text='Month period in YYYY-MM format'
    )

    def validate(self, attrs):
        """Turn period into the first day of that month."""
        period = attrs.get('period')
        if period:
            year, month = (int(part) for part in period.split('-'))
            # The report also covers the month before, so year 1 has no room
            if year < MIN_PERIOD_YEAR:
                raise serializers.ValidationError(
                    {'period': f'Year must be {MIN_PERIOD_YEAR} or later'}
                )
            attrs['now'] = date(year, month, 1)
        return attrs


# =============================================================================
# Response Serializers
# =============================================================================

class CategoryTotalSerializer(serializers.Serializer):
    category = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()


class MonthSummarySerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    by_category = CategoryTotalSerializer(many=True)


class InsightSerializer(serializers.Serializer):
    """Single insight; optional keys are omitted when not relevant."""

    type = serializers.ChoiceField(choices=['success', 'info', 'warning', 'danger'])
    message = serializers.CharField()
    value = serializers.DecimalField(max_digits=14, decimal_places=2)
    category = serializers.CharField(required=False)
    percent = serializers.DecimalField(max_digits=10, decimal_places=1, required=False)
    limit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    overage = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)


class InsightsReportSerializer(serializers.Serializer):
    current_month = MonthSummarySerializer()
    previous_month = MonthSummarySerializer()
    insights = InsightSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    """Error response format."""
    error = serializers.CharField()
