from django.contrib import admin
from .models import GroupExpense, Split


class SplitInline(admin.TabularInline):
    """Inline admin for expense splits."""
    model = Split
    extra = 0
    fields = ['user', 'amount', 'is_paid', 'paid_at', 'version']
    readonly_fields = ['version']


@admin.register(GroupExpense)
class GroupExpenseAdmin(admin.ModelAdmin):
    """Admin interface for group ledger entries."""

    list_display = ['description', 'group', 'paid_by', 'amount', 'split_type', 'category', 'date']
    list_filter = ['split_type', 'category', 'date']
    search_fields = ['description', 'group__name', 'paid_by__email']
    readonly_fields = ['created_at']
    inlines = [SplitInline]
    date_hierarchy = 'date'
    ordering = ['-date', '-created_at']

    def get_queryset(self, request):
        """Join group and payer for the changelist columns."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'paid_by')


@admin.register(Split)
class SplitAdmin(admin.ModelAdmin):
    list_display = ['user', 'expense', 'amount', 'is_paid', 'paid_at']
    list_filter = ['is_paid']
    search_fields = ['user__email', 'expense__description']
    readonly_fields = ['version']
