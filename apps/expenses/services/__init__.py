"""
Expenses app services layer.

Personal expenses, monthly budgets, reusable expense templates and
savings goals. Expenses and budgets feed the insights engine in the
analytics app.
"""

from .exceptions import (
    ExpensesServiceError,
    ExpenseNotFoundError,
    BudgetNotFoundError,
    TemplateNotFoundError,
    GoalNotFoundError,
    ContributionNotFoundError,
    InvalidContributionError,
)

from .expense_management import (
    list_expenses,
    get_expense,
    create_expense,
    update_expense,
    delete_expense,
    sync_expenses,
    aggregate_expenses,
)

from .budget_management import (
    list_budgets,
    upsert_budget,
    delete_budget,
)

from .template_management import (
    list_templates,
    list_frequent_templates,
    get_template,
    create_template,
    update_template,
    delete_template,
    use_template,
)

from .goal_management import (
    list_goals,
    get_goal,
    create_goal,
    update_goal,
    delete_goal,
    add_contribution,
    remove_contribution,
    get_goal_summary,
)


__all__ = [
    # Exceptions
    'ExpensesServiceError',
    'ExpenseNotFoundError',
    'BudgetNotFoundError',
    'TemplateNotFoundError',
    'GoalNotFoundError',
    'ContributionNotFoundError',
    'InvalidContributionError',

    # Expense Management
    'list_expenses',
    'get_expense',
    'create_expense',
    'update_expense',
    'delete_expense',
    'sync_expenses',
    'aggregate_expenses',

    # Budget Management
    'list_budgets',
    'upsert_budget',
    'delete_budget',

    # Template Management
    'list_templates',
    'list_frequent_templates',
    'get_template',
    'create_template',
    'update_template',
    'delete_template',
    'use_template',

    # Goal Management
    'list_goals',
    'get_goal',
    'create_goal',
    'update_goal',
    'delete_goal',
    'add_contribution',
    'remove_contribution',
    'get_goal_summary',
]
