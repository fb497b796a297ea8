"""
Serializers for expenses app.

Input serializers validate query parameters and payloads; model
serializers format responses.
"""

from decimal import Decimal
from rest_framework import serializers
from .models import (
    Expense,
    Budget,
    Template,
    Goal,
    GoalContribution,
    ExpenseCategory,
    PaymentMethod,
    BUDGET_CATEGORY_CHOICES,
    hex_color_validator,
)


class ExpenseSerializer(serializers.ModelSerializer):
    """Personal expense."""

    class Meta:
        model = Expense
        fields = [
            'id',
            'amount',
            'category',
            'payment_method',
            'description',
            'date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {'date': {'required': False}}


class ExpenseUpdateSerializer(serializers.Serializer):
    """Partial update payload; omitted fields keep their value."""

    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.01'), required=False
    )
    category = serializers.ChoiceField(choices=ExpenseCategory.choices, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)
    date = serializers.DateField(required=False)


class ExpenseSyncSerializer(serializers.Serializer):
    """Batch of expenses recorded offline."""

    expenses = ExpenseSerializer(many=True, allow_empty=False)


class ExpenseFilterSerializer(serializers.Serializer):
    """Validate list filters."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    category = serializers.ChoiceField(choices=ExpenseCategory.choices, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)

    def validate(self, attrs):
        start = attrs.get('start_date')
        end = attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })
        return attrs


class AggregationQuerySerializer(serializers.Serializer):
    """Validate aggregation parameters."""

    group_by = serializers.ChoiceField(
        choices=['category', 'day', 'month'],
        default='category'
    )
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class AggregationRowSerializer(serializers.Serializer):
    key = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()
    avg_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class BudgetSerializer(serializers.ModelSerializer):
    """Monthly budget."""

    category = serializers.ChoiceField(choices=BUDGET_CATEGORY_CHOICES)
    limit = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2000, max_value=9999)

    class Meta:
        model = Budget
        fields = ['id', 'category', 'limit', 'month', 'year', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        # Upsert semantics; uniqueness is handled by the service
        validators = []


class BudgetQuerySerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    year = serializers.IntegerField(min_value=2000, max_value=9999, required=False)


class TemplateSerializer(serializers.ModelSerializer):
    """Reusable expense template."""

    icon = serializers.CharField(max_length=16, required=False, allow_blank=True)

    class Meta:
        model = Template
        fields = [
            'id',
            'name',
            'amount',
            'category',
            'payment_method',
            'description',
            'icon',
            'usage_count',
            'last_used',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'usage_count', 'last_used', 'created_at', 'updated_at']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Template name is required')
        return value.strip()


class TemplateUpdateSerializer(serializers.Serializer):
    """Partial update payload; omitted fields keep their value."""

    name = serializers.CharField(max_length=50, required=False)
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.01'), required=False
    )
    category = serializers.ChoiceField(choices=ExpenseCategory.choices, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)
    icon = serializers.CharField(max_length=16, required=False, allow_blank=True)


class TemplateUseSerializer(serializers.Serializer):
    """One-off overrides when recording an expense from a template."""

    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.01'), required=False
    )
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)
    date = serializers.DateField(required=False)


class TemplateUsageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Template
        fields = ['id', 'usage_count', 'last_used']


class TemplateUseResultSerializer(serializers.Serializer):
    expense = ExpenseSerializer()
    template = TemplateUsageSerializer()


class GoalContributionSerializer(serializers.ModelSerializer):
    class Meta:
        model = GoalContribution
        fields = ['id', 'amount', 'note', 'date']
        read_only_fields = fields


class GoalSerializer(serializers.ModelSerializer):
    """Savings goal with its contributions and progress."""

    target_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('1.00'))
    icon = serializers.CharField(max_length=16, required=False, allow_blank=True)
    color = serializers.CharField(max_length=7, required=False, validators=[hex_color_validator])
    progress = serializers.DecimalField(max_digits=5, decimal_places=2, read_only=True)
    days_remaining = serializers.IntegerField(read_only=True, allow_null=True)
    contributions = GoalContributionSerializer(many=True, read_only=True)

    class Meta:
        model = Goal
        fields = [
            'id',
            'name',
            'target_amount',
            'current_amount',
            'deadline',
            'icon',
            'color',
            'is_completed',
            'progress',
            'days_remaining',
            'contributions',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'current_amount', 'is_completed', 'created_at', 'updated_at']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Goal name is required')
        return value.strip()


class GoalUpdateSerializer(serializers.Serializer):
    """Partial update payload; send deadline as null to clear it."""

    name = serializers.CharField(max_length=50, required=False)
    target_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('1.00'), required=False
    )
    deadline = serializers.DateField(required=False, allow_null=True)
    icon = serializers.CharField(max_length=16, required=False, allow_blank=True)
    color = serializers.CharField(max_length=7, required=False, validators=[hex_color_validator])


class ContributionSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    note = serializers.CharField(max_length=200, required=False, allow_blank=True)


class GoalSummarySerializer(serializers.Serializer):
    total_goals = serializers.IntegerField()
    completed_goals = serializers.IntegerField()
    active_goals = serializers.IntegerField()
    total_saved = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_target = serializers.DecimalField(max_digits=14, decimal_places=2)
    overall_progress = serializers.DecimalField(max_digits=10, decimal_places=2)
