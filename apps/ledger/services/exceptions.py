"""
Domain-specific exceptions for ledger app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class LedgerServiceError(Exception):
    """Base exception for all ledger service errors."""
    pass


class InvalidSplitPolicyError(LedgerServiceError):
    """Raised when a split policy is malformed."""
    pass


class EmptyParticipantSetError(LedgerServiceError):
    """Raised when an equal split resolves to no participants."""
    pass


class SplitSumMismatchError(LedgerServiceError):
    """Raised when exact amounts or percentages don't add up."""
    pass


class InvalidSettlementError(LedgerServiceError):
    """Raised when a settlement request is invalid."""
    pass


class ExpenseNotFoundError(LedgerServiceError):
    """Raised when an expense doesn't exist in the group."""
    pass


class SplitNotFoundError(LedgerServiceError):
    """Raised when an expense has no split for the given user."""
    pass


class SplitAlreadyPaidError(LedgerServiceError):
    """Raised when marking an already paid split."""
    pass


class SplitVersionConflictError(LedgerServiceError):
    """Raised when a split changed since the caller last read it."""
    pass


class NoPendingPaymentsError(LedgerServiceError):
    """Raised when a reminder targets a user who owes nothing."""
    pass


class InsufficientPermissionsError(LedgerServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass


class LedgerPersistenceError(LedgerServiceError):
    """Raised when a ledger write fails at the database level."""
    pass
