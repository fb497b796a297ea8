from django.contrib import admin
from .models import Expense, Budget, Template, Goal, GoalContribution


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['user', 'amount', 'category', 'payment_method', 'date']
    list_filter = ['category', 'payment_method', 'date']
    search_fields = ['description', 'user__email']
    date_hierarchy = 'date'
    ordering = ['-date']


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    list_display = ['user', 'category', 'limit', 'month', 'year']
    list_filter = ['category', 'year', 'month']
    search_fields = ['user__email']


@admin.register(Template)
class TemplateAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'amount', 'category', 'usage_count', 'last_used']
    list_filter = ['category', 'payment_method']
    search_fields = ['name', 'user__email']
    readonly_fields = ['usage_count', 'last_used', 'created_at', 'updated_at']


class GoalContributionInline(admin.TabularInline):
    model = GoalContribution
    extra = 0
    readonly_fields = ['amount', 'note', 'date']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'current_amount', 'target_amount', 'deadline', 'is_completed']
    list_filter = ['is_completed']
    search_fields = ['name', 'user__email']
    readonly_fields = ['current_amount', 'is_completed', 'created_at', 'updated_at']
    inlines = [GoalContributionInline]
