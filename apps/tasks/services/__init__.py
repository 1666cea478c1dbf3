"""Services for tasks business logic."""

from .exceptions import TaskNotFoundError, InvalidAssigneeError, TaskPermissionError
from .task_management import (
    UNSET,
    create_task,
    update_task,
    delete_task,
    get_task,
    list_activity_tasks,
    list_my_tasks,
)

__all__ = [
    # Exceptions
    'TaskNotFoundError',
    'InvalidAssigneeError',
    'TaskPermissionError',
    # Services
    'UNSET',
    'create_task',
    'update_task',
    'delete_task',
    'get_task',
    'list_activity_tasks',
    'list_my_tasks',
]
