"""Domain-specific exceptions for tasks app."""

from apps.core.exceptions import AccessDeniedError, InvalidOperationError, NotFoundError


class TaskNotFoundError(NotFoundError):
    """Raised when a task does not exist."""
    default_detail = 'Task not found.'
    default_code = 'task_not_found'


class InvalidAssigneeError(InvalidOperationError):
    """Raised when the assignee does not exist or is not a participant."""
    default_detail = 'Assigned user must be a participant of the activity.'
    default_code = 'invalid_assignee'


class TaskPermissionError(AccessDeniedError):
    """Raised when the user may not modify or delete the task."""
    default_detail = 'You do not have permission to modify this task.'
    default_code = 'task_permission_denied'
