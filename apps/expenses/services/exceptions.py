"""
Domain-specific exceptions for expenses app.
"""


class ExpensesServiceError(Exception):
    """Base exception for all expenses service errors."""
    pass


class ExpenseNotFoundError(ExpensesServiceError):
    """Raised when an expense does not exist or belongs to another user."""
    pass


class BudgetNotFoundError(ExpensesServiceError):
    """Raised when a budget does not exist or belongs to another user."""
    pass


class TemplateNotFoundError(ExpensesServiceError):
    """Raised when a template does not exist or belongs to another user."""
    pass


class GoalNotFoundError(ExpensesServiceError):
    """Raised when a goal does not exist or belongs to another user."""
    pass


class ContributionNotFoundError(ExpensesServiceError):
    """Raised when a contribution is not part of the given goal."""
    pass


class InvalidContributionError(ExpensesServiceError):
    """Raised when a contribution amount is not positive."""
    pass
