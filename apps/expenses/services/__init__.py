"""
Expenses services.

Exports all public service functions and exceptions.
"""

from .exceptions import (
    ExpenseNotFoundError,
    ExpenseShareNotFoundError,
    ExpensePermissionError,
    InvalidSplitError,
    NoParticipantsError,
    InvalidShareUserError,
    InvalidExpenseTaskError,
)
from .split_calculation import ExpenseSplitService
from .expense_management import (
    UNSET,
    create_expense,
    update_expense,
    delete_expense,
    get_expense,
    list_activity_expenses,
    get_outstanding_shares,
    get_activity_expense_summary,
)
from .share_payment import (
    mark_share_paid,
    unmark_share_paid,
    mark_all_paid_for_activity,
)

__all__ = [
    # Exceptions
    'ExpenseNotFoundError',
    'ExpenseShareNotFoundError',
    'ExpensePermissionError',
    'InvalidSplitError',
    'NoParticipantsError',
    'InvalidShareUserError',
    'InvalidExpenseTaskError',
    # Split calculation
    'ExpenseSplitService',
    # Expense management
    'UNSET',
    'create_expense',
    'update_expense',
    'delete_expense',
    'get_expense',
    'list_activity_expenses',
    'get_outstanding_shares',
    'get_activity_expense_summary',
    # Share payment
    'mark_share_paid',
    'unmark_share_paid',
    'mark_all_paid_for_activity',
]
