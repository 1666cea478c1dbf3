"""
Task management service.

Tasks live inside an activity; anyone with access to the activity can
create and edit them. Deletion is limited to the task creator and the
activity admins.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.activities.models import Activity
from apps.activities.services import get_accessible_activity, is_activity_admin
from apps.tasks.models import Task, TaskPriority, TaskStatus

from .exceptions import InvalidAssigneeError, TaskNotFoundError, TaskPermissionError

logger = logging.getLogger(__name__)

# Distinguishes "leave assignee alone" from "unassign" (None)
UNSET = object()


def _resolve_assignee(activity: Activity, user_id: Optional[UUID]) -> Optional[User]:
    """
    Validate that the assignee exists and takes part in the activity.

    Raises:
        InvalidAssigneeError: If user is unknown or not a participant
    """
    if user_id is None:
        return None

    try:
        assignee = User.objects.get(id=user_id)
    except (User.DoesNotExist, DjangoValidationError):
        raise InvalidAssigneeError(f"User with ID {user_id} not found")

    if not activity.has_access(assignee):
        raise InvalidAssigneeError("Assigned user must be a participant of the activity")

    return assignee


def _apply_status(task: Task, status: str) -> None:
    """Stamp completed_at on first completion, clear it for any other status."""
    task.status = status
    if status == TaskStatus.COMPLETED:
        if task.completed_at is None:
            task.completed_at = timezone.now()
    else:
        task.completed_at = None


def _get_task_with_access(task_id: UUID, user: User, *, for_update: bool = False) -> Task:
    queryset = Task.objects.select_related('activity', 'assigned_to', 'created_by')
    if for_update:
        queryset = queryset.select_for_update()

    try:
        task = queryset.get(id=task_id)
    except (Task.DoesNotExist, DjangoValidationError):
        raise TaskNotFoundError(f"Task with ID {task_id} not found")

    # Raises if the user cannot see the owning activity
    get_accessible_activity(task.activity_id, user)
    return task


@transaction.atomic
def create_task(
    *,
    activity_id: UUID,
    user: User,
    name: str,
    description: str = "",
    due_date: Optional[datetime] = None,
    priority: str = TaskPriority.MEDIUM,
    status: str = TaskStatus.PENDING,
    assigned_to_id: Optional[UUID] = None
) -> Task:
    """
    Create a task inside an activity.

    Args:
        activity_id: UUID of the owning activity
        user: User creating the task (must have activity access)
        name: Task name
        description: Optional description
        due_date: Optional due date
        priority: TaskPriority value
        status: Initial TaskStatus value
        assigned_to_id: Optional participant to assign

    Returns:
        Created Task instance

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user has no access
        InvalidAssigneeError: If assignee is not a participant
    """
    activity = get_accessible_activity(activity_id, user)
    assignee = _resolve_assignee(activity, assigned_to_id)

    task = Task(
        activity=activity,
        name=name.strip(),
        description=(description or "").strip(),
        due_date=due_date,
        priority=priority,
        assigned_to=assignee,
        created_by=user,
    )
    _apply_status(task, status)
    task.save()

    logger.info("Task %s created in activity %s", task.id, activity.id)
    return task


@transaction.atomic
def update_task(
    *,
    task_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    due_date: Optional[datetime] = None,
    priority: Optional[str] = None,
    status: Optional[str] = None,
    assigned_to_id=UNSET
) -> Task:
    """
    Partially update a task.

    Pass ``assigned_to_id=None`` to unassign; omit it to keep the assignee.

    Raises:
        TaskNotFoundError: If task doesn't exist
        ActivityAccessDeniedError: If user has no access to the activity
        InvalidAssigneeError: If the new assignee is not a participant
    """
    task = _get_task_with_access(task_id, user, for_update=True)

    if name is not None and name.strip():
        task.name = name.strip()
    if description is not None:
        task.description = description.strip()
    if due_date is not None:
        task.due_date = due_date
    if priority is not None:
        task.priority = priority
    if status is not None:
        _apply_status(task, status)
    if assigned_to_id is not UNSET:
        task.assigned_to = _resolve_assignee(task.activity, assigned_to_id)

    task.save()
    return task


@transaction.atomic
def delete_task(*, task_id: UUID, user: User) -> None:
    """
    Delete a task.

    Allowed for the task creator, the activity creator and activity admins.

    Raises:
        TaskNotFoundError: If task doesn't exist
        ActivityAccessDeniedError: If user has no access to the activity
        TaskPermissionError: If user may not delete the task
    """
    task = _get_task_with_access(task_id, user, for_update=True)

    if task.created_by_id != user.id and not is_activity_admin(task.activity, user):
        raise TaskPermissionError("Only the task creator or activity admins can delete this task")

    task.delete()
    logger.info("Task %s deleted by %s", task_id, user.id)


def get_task(*, task_id: UUID, user: User) -> Task:
    """Get a task from an activity the user can access."""
    return _get_task_with_access(task_id, user)


def list_activity_tasks(
    *,
    activity_id: UUID,
    user: User,
    status: Optional[str] = None,
    assigned_to_id: Optional[UUID] = None
) -> QuerySet:
    """
    Tasks of an activity, optionally filtered by status and assignee.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user has no access
    """
    activity = get_accessible_activity(activity_id, user)

    queryset = (
        Task.objects
        .filter(activity=activity)
        .select_related('assigned_to', 'created_by')
    )
    if status:
        queryset = queryset.filter(status=status)
    if assigned_to_id:
        queryset = queryset.filter(assigned_to_id=assigned_to_id)

    return queryset


def list_my_tasks(*, user: User, status: Optional[str] = None) -> QuerySet:
    """Tasks assigned to the user across all activities."""
    queryset = (
        Task.objects
        .filter(assigned_to=user)
        .select_related('activity', 'assigned_to', 'created_by')
    )
    if status:
        queryset = queryset.filter(status=status)
    return queryset
