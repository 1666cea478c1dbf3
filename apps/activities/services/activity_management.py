"""
Activity management service.

Creates, updates and deletes activities. The creator is always registered
as an admin participant.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.activities.models import Activity, ActivityUser

from .access import get_accessible_activity, get_activity_or_404
from .exceptions import InvalidDateRangeError, InsufficientActivityPermissionsError

logger = logging.getLogger(__name__)


def _validate_date_range(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date and end_date and end_date < start_date:
        raise InvalidDateRangeError("End date must be after start date")


def _activities_with_relations() -> QuerySet:
    return (
        Activity.objects
        .select_related('created_by')
        .prefetch_related('participants__user')
    )


@transaction.atomic
def create_activity(
    *,
    name: str,
    created_by: User,
    description: str = "",
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    location: str = ""
) -> Activity:
    """
    Create a new activity and register the creator as admin participant.

    Args:
        name: Activity name (trimmed)
        created_by: User creating the activity
        description: Optional description
        start_date: Optional start
        end_date: Optional end, not before start_date
        location: Optional location

    Returns:
        Created Activity instance

    Raises:
        InvalidDateRangeError: If end_date precedes start_date
    """
    _validate_date_range(start_date, end_date)

    activity = Activity.objects.create(
        name=name.strip(),
        description=(description or "").strip(),
        start_date=start_date,
        end_date=end_date,
        location=(location or "").strip(),
        created_by=created_by,
    )

    ActivityUser.objects.create(
        activity=activity,
        user=created_by,
        is_admin=True,
    )

    logger.info("Activity %s created by %s", activity.id, created_by.id)
    return activity


@transaction.atomic
def update_activity(
    *,
    activity_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    location: Optional[str] = None
) -> Activity:
    """
    Partially update an activity.

    Only the creator or a system admin may update. Missing values leave
    the current value in place; a blank name is ignored while a blank
    description or location clears it.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        InsufficientActivityPermissionsError: If user is not creator/admin
        InvalidDateRangeError: If the resulting date range is invalid
    """
    activity = get_activity_or_404(activity_id, for_update=True)

    if not (activity.is_creator(user) or user.is_system_admin):
        raise InsufficientActivityPermissionsError(
            "Only the activity creator can update this activity"
        )

    if name is not None and name.strip():
        activity.name = name.strip()
    if description is not None:
        activity.description = description.strip()
    if location is not None:
        activity.location = location.strip()
    if start_date is not None:
        activity.start_date = start_date
    if end_date is not None:
        activity.end_date = end_date

    _validate_date_range(activity.start_date, activity.end_date)

    activity.save()
    return activity


@transaction.atomic
def delete_activity(*, activity_id: UUID, user: User) -> None:
    """
    Delete an activity together with its participants, tasks and expenses.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        InsufficientActivityPermissionsError: If user is not creator/admin
    """
    activity = get_activity_or_404(activity_id, for_update=True)

    if not (activity.is_creator(user) or user.is_system_admin):
        raise InsufficientActivityPermissionsError(
            "Only the activity creator can delete this activity"
        )

    activity.delete()
    logger.info("Activity %s deleted by %s", activity_id, user.id)


def get_activity(*, activity_id: UUID, user: User) -> Activity:
    """
    Get an activity the user can access, with participants preloaded.

    System admins can view any activity.
    """
    get_accessible_activity(activity_id, user, allow_system_admin=True)
    return _activities_with_relations().get(id=activity_id)


def list_user_activities(*, user: User) -> QuerySet:
    """Activities the user created or participates in."""
    return (
        _activities_with_relations()
        .filter(Q(created_by=user) | Q(participants__user=user))
        .distinct()
    )


def list_all_activities(*, requested_by: User) -> QuerySet:
    """
    Every activity in the system (admin only).

    Raises:
        InsufficientActivityPermissionsError: If requested_by is not an admin
    """
    if not requested_by.is_system_admin:
        raise InsufficientActivityPermissionsError("Administrator role required")
    return _activities_with_relations().all()
