from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.utils import timezone
from decimal import Decimal, ROUND_HALF_UP
import uuid


class ExpenseCategory(models.TextChoices):
    FOOD = 'Food', 'Food'
    TRANSPORT = 'Transport', 'Transport'
    SHOPPING = 'Shopping', 'Shopping'
    BILLS = 'Bills', 'Bills'
    ENTERTAINMENT = 'Entertainment', 'Entertainment'
    HEALTH = 'Health', 'Health'
    OTHER = 'Other', 'Other'


class PaymentMethod(models.TextChoices):
    CASH = 'Cash', 'Cash'
    CARD = 'Card', 'Card'
    UPI = 'UPI', 'UPI'
    NET_BANKING = 'NetBanking', 'Net Banking'


# Budget covering the whole month rather than one category
OVERALL_BUDGET = 'Overall'

BUDGET_CATEGORY_CHOICES = ExpenseCategory.choices + [(OVERALL_BUDGET, 'Overall')]


class Expense(models.Model):
    """Personal expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses'
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    category = models.CharField(max_length=20, choices=ExpenseCategory.choices)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    description = models.CharField(max_length=200, blank=True)
    date = models.DateField(default=timezone.localdate)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['user', 'date'], name='expenses_user_date_idx'),
            models.Index(fields=['user', 'category'], name='expenses_user_category_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.category} - {self.amount} ({self.date})"


class Budget(models.Model):
    """Monthly spending limit for a category or the whole month."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='budgets'
    )

    category = models.CharField(max_length=20, choices=BUDGET_CATEGORY_CHOICES)
    limit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    year = models.PositiveSmallIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'budgets'
        unique_together = [['user', 'category', 'month', 'year']]
        ordering = ['-year', '-month', 'category']

    def __str__(self):
        return f"{self.category} {self.month:02d}/{self.year}: {self.limit}"


class Template(models.Model):
    """Saved expense for one-tap reuse, e.g. rent or a daily commute."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expense_templates'
    )

    name = models.CharField(max_length=50)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    category = models.CharField(max_length=20, choices=ExpenseCategory.choices)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    description = models.CharField(max_length=200, blank=True)
    icon = models.CharField(max_length=16, default='📋')

    usage_count = models.PositiveIntegerField(default=0)
    last_used = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expense_templates'
        indexes = [
            models.Index(fields=['user', '-usage_count'], name='templates_user_usage_idx'),
        ]
        ordering = ['-usage_count', '-created_at']

    def __str__(self):
        return f"{self.name} ({self.amount})"


hex_color_validator = RegexValidator(
    regex=r'^#[0-9A-Fa-f]{6}$',
    message='Color must be a hex value like #4CAF50'
)


class Goal(models.Model):
    """Savings goal that fills up through contributions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='goals'
    )

    name = models.CharField(max_length=50)
    target_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('1.00'))]
    )
    current_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    deadline = models.DateField(null=True, blank=True)
    icon = models.CharField(max_length=16, default='🎯')
    color = models.CharField(max_length=7, default='#4CAF50', validators=[hex_color_validator])
    is_completed = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'goals'
        indexes = [
            models.Index(fields=['user', 'is_completed'], name='goals_user_completed_idx'),
        ]
        ordering = ['is_completed', '-created_at']

    def __str__(self):
        return f"{self.name}: {self.current_amount}/{self.target_amount}"

    @property
    def progress(self) -> Decimal:
        """Percent saved, capped at 100."""
        percent = self.current_amount / self.target_amount * 100
        return min(percent, Decimal('100')).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @property
    def days_remaining(self):
        """Whole days until the deadline, never negative; None without one."""
        if self.deadline is None:
            return None
        return max((self.deadline - timezone.localdate()).days, 0)

    def refresh_completion(self):
        self.is_completed = self.current_amount >= self.target_amount


class GoalContribution(models.Model):
    """Money put towards a goal."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    goal = models.ForeignKey(
        Goal,
        on_delete=models.CASCADE,
        related_name='contributions'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    note = models.CharField(max_length=200, blank=True)
    date = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'goal_contributions'
        ordering = ['date']

    def __str__(self):
        return f"{self.amount} to {self.goal_id}"
