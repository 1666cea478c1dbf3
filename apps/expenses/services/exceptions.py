"""Domain-specific exceptions for expenses app."""

from apps.core.exceptions import (
    AccessDeniedError,
    InvalidOperationError,
    NotFoundError,
    UnprocessableError,
)


class ExpenseNotFoundError(NotFoundError):
    """Raised when an expense does not exist in the given activity."""
    default_detail = 'Expense not found.'
    default_code = 'expense_not_found'


class ExpenseShareNotFoundError(NotFoundError):
    """Raised when a share does not exist under the given expense."""
    default_detail = 'Expense share not found.'
    default_code = 'expense_share_not_found'


class ExpensePermissionError(AccessDeniedError):
    """Raised when the user may not modify the expense or share."""
    default_detail = 'You do not have permission to modify this expense.'
    default_code = 'expense_permission_denied'


class InvalidSplitError(UnprocessableError):
    """Raised when a share set breaks the split rules."""
    default_detail = 'Invalid expense split.'
    default_code = 'invalid_split'


class NoParticipantsError(InvalidSplitError):
    """Raised when there is nobody to split the expense among."""
    default_detail = 'At least one participant is required.'
    default_code = 'no_participants'


class InvalidShareUserError(InvalidOperationError):
    """Raised when a share or payer refers to a non-participant."""
    default_detail = 'Users in an expense must be participants of the activity.'
    default_code = 'invalid_share_user'


class InvalidExpenseTaskError(InvalidOperationError):
    """Raised when the linked task belongs to another activity."""
    default_detail = 'Task does not belong to this activity.'
    default_code = 'invalid_task'
