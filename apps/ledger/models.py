from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


SETTLEMENT_CATEGORY = 'Settlement'


class SplitType(models.TextChoices):
    EQUAL = 'equal', 'Equal'
    EXACT = 'exact', 'Exact'
    PERCENTAGE = 'percentage', 'Percentage'


class GroupExpense(models.Model):
    """Ledger entry: an expense paid by one member and shared by others."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    paid_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='group_expenses_paid'
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.CharField(max_length=200)
    category = models.CharField(max_length=30, default='Other')
    date = models.DateField(default=timezone.localdate)
    split_type = models.CharField(
        max_length=20,
        choices=SplitType.choices,
        default=SplitType.EQUAL
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_expenses'
        indexes = [
            models.Index(fields=['group', 'date'], name='group_expenses_group_date_idx'),
            models.Index(fields=['paid_by'], name='group_expenses_paid_by_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.description} - {self.amount} ({self.group.name})"

    @property
    def is_settlement(self):
        return self.category == SETTLEMENT_CATEGORY


class Split(models.Model):
    """One participant's share of a group expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    expense = models.ForeignKey(
        GroupExpense,
        on_delete=models.CASCADE,
        related_name='splits'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='group_splits'
    )
    # Order of the split within its expense
    position = models.PositiveSmallIntegerField(default=0)

    amount = models.DecimalField(max_digits=12, decimal_places=2)

    # Payment tracking
    is_paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)

    # Incremented on every state transition; clients send it back for
    # optimistic concurrency checks
    version = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'group_expense_splits'
        unique_together = [['expense', 'user']]
        indexes = [
            models.Index(fields=['user', 'is_paid'], name='splits_user_paid_idx'),
            models.Index(fields=['expense', 'is_paid'], name='splits_expense_paid_idx'),
        ]
        ordering = ['position']

    def __str__(self):
        state = 'paid' if self.is_paid else 'unpaid'
        return f"{self.user.get_display_name()} owes {self.amount} ({state})"

    def mark_paid(self):
        """Mark split as paid. Callers must hold a row lock."""
        self.is_paid = True
        self.paid_at = timezone.now()
        self.version += 1
        self.save(update_fields=['is_paid', 'paid_at', 'version'])
