"""
Ledger app services layer.

Split calculation, balance aggregation and debt simplification are pure
functions; expense management wires them to the database. All ledger
writes run inside transactions.
"""

from .exceptions import (
    LedgerServiceError,
    InvalidSplitPolicyError,
    EmptyParticipantSetError,
    SplitSumMismatchError,
    InvalidSettlementError,
    ExpenseNotFoundError,
    SplitNotFoundError,
    SplitAlreadyPaidError,
    SplitVersionConflictError,
    NoPendingPaymentsError,
    InsufficientPermissionsError,
    LedgerPersistenceError,
)

from .split_calculation import (
    SplitLine,
    compute_splits,
    round_money,
)

from .balance_aggregation import (
    Balance,
    LedgerEntry,
    aggregate_balances,
    compute_balances,
)

from .debt_simplification import (
    Debt,
    simplify_debts,
)

from .expense_management import (
    add_group_expense,
    record_settlement,
    mark_split_paid,
    list_group_expenses,
    get_balances,
    get_pending_payments,
    send_payment_reminder,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'InvalidSplitPolicyError',
    'EmptyParticipantSetError',
    'SplitSumMismatchError',
    'InvalidSettlementError',
    'ExpenseNotFoundError',
    'SplitNotFoundError',
    'SplitAlreadyPaidError',
    'SplitVersionConflictError',
    'NoPendingPaymentsError',
    'InsufficientPermissionsError',
    'LedgerPersistenceError',

    # Split Calculation
    'SplitLine',
    'compute_splits',
    'round_money',

    # Balance Aggregation
    'Balance',
    'LedgerEntry',
    'aggregate_balances',
    'compute_balances',

    # Debt Simplification
    'Debt',
    'simplify_debts',

    # Expense Management
    'add_group_expense',
    'record_settlement',
    'mark_split_paid',
    'list_group_expenses',
    'get_balances',
    'get_pending_payments',
    'send_payment_reminder',
]
