"""
Activity access checks shared by every activity-scoped service.

A user has access to an activity when they created it or participate in it.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError

from apps.accounts.models import User
from apps.activities.models import Activity

from .exceptions import ActivityNotFoundError, ActivityAccessDeniedError

logger = logging.getLogger(__name__)


def has_activity_access(activity: Activity, user: User) -> bool:
    return activity.has_access(user)


def is_activity_admin(activity: Activity, user: User) -> bool:
    return activity.is_admin(user)


def get_activity_or_404(activity_id: UUID, *, for_update: bool = False) -> Activity:
    """
    Fetch an activity by ID.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
    """
    queryset = Activity.objects.select_related('created_by')
    if for_update:
        queryset = queryset.select_for_update()

    try:
        return queryset.get(id=activity_id)
    except (Activity.DoesNotExist, DjangoValidationError):
        raise ActivityNotFoundError(f"Activity with ID {activity_id} not found")


def get_accessible_activity(
    activity_id: UUID,
    user: User,
    *,
    for_update: bool = False,
    allow_system_admin: bool = False
) -> Activity:
    """
    Fetch an activity the user is allowed to see.

    Args:
        activity_id: UUID of the activity
        user: Requesting user
        for_update: Lock the activity row
        allow_system_admin: Let system admins through even without membership

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user is neither creator nor participant
    """
    activity = get_activity_or_404(activity_id, for_update=for_update)

    if has_activity_access(activity, user):
        return activity
    if allow_system_admin and user.is_system_admin:
        return activity

    logger.warning("User %s denied access to activity %s", user.id, activity.id)
    raise ActivityAccessDeniedError("You do not have access to this activity")
