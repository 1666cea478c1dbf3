"""
Participant management service.

Handles the ActivityUser join rows: listing, adding (on invitation
acceptance), removing and toggling the admin flag.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.activities.models import Activity, ActivityUser

from .access import get_accessible_activity, get_activity_or_404
from .exceptions import (
    AlreadyParticipantError,
    CannotChangeCreatorAdminError,
    CannotRemoveCreatorError,
    InsufficientActivityPermissionsError,
    ParticipantNotFoundError,
)

logger = logging.getLogger(__name__)


def get_participants(*, activity_id: UUID, user: User) -> QuerySet:
    """
    Participants of an activity the user can access.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user has no access
    """
    activity = get_accessible_activity(activity_id, user, allow_system_admin=True)
    return (
        ActivityUser.objects
        .filter(activity=activity)
        .select_related('user')
        .order_by('-is_admin', 'joined_at')
    )


def add_participant(*, activity: Activity, user: User, is_admin: bool = False) -> ActivityUser:
    """
    Register a user as participant.

    Must run inside the caller's transaction.

    Raises:
        AlreadyParticipantError: If the user already participates
    """
    if activity.has_participant(user):
        raise AlreadyParticipantError(f"User is already a participant of {activity.name}")

    try:
        with transaction.atomic():
            participant = ActivityUser.objects.create(
                activity=activity,
                user=user,
                is_admin=is_admin,
            )
    except IntegrityError:
        raise AlreadyParticipantError(f"User is already a participant of {activity.name}")

    logger.info("User %s joined activity %s", user.id, activity.id)
    return participant


@transaction.atomic
def remove_participant(
    *,
    activity_id: UUID,
    user_id: UUID,
    removed_by: User
) -> None:
    """
    Remove a participant from an activity.

    The creator can remove anyone except themselves; any participant may
    remove (leave) themselves. The creator can never be removed. The
    caller's right to remove is checked before the target is looked up.

    Args:
        activity_id: UUID of the activity
        user_id: UUID of the participant to remove
        removed_by: User performing the removal

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        InsufficientActivityPermissionsError: If removed_by is neither the
            creator nor the participant themselves
        ParticipantNotFoundError: If the target is not a participant
        CannotRemoveCreatorError: If the target is the activity creator
    """
    activity = get_activity_or_404(activity_id, for_update=True)

    is_self = str(user_id).lower() == str(removed_by.id)
    if not (is_self or activity.is_creator(removed_by)):
        raise InsufficientActivityPermissionsError(
            "Only the activity creator can remove other participants"
        )

    try:
        participant = (
            ActivityUser.objects
            .select_for_update()
            .get(activity=activity, user_id=user_id)
        )
    except (ActivityUser.DoesNotExist, DjangoValidationError):
        raise ParticipantNotFoundError("User is not a participant of this activity")

    if participant.user_id == activity.created_by_id:
        raise CannotRemoveCreatorError("The activity creator cannot be removed")

    participant.delete()
    logger.info(
        "User %s removed from activity %s by %s",
        user_id, activity.id, removed_by.id
    )


@transaction.atomic
def set_participant_admin(
    *,
    activity_id: UUID,
    user_id: UUID,
    is_admin: bool,
    updated_by: User
) -> ActivityUser:
    """
    Grant or revoke a participant's admin flag (creator only).

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        InsufficientActivityPermissionsError: If updated_by is not the creator
        ParticipantNotFoundError: If the target is not a participant
        CannotChangeCreatorAdminError: If the target is the creator
    """
    activity = get_activity_or_404(activity_id, for_update=True)

    if not activity.is_creator(updated_by):
        raise InsufficientActivityPermissionsError(
            "Only the activity creator can change participant roles"
        )

    try:
        participant = (
            ActivityUser.objects
            .select_for_update()
            .select_related('user')
            .get(activity=activity, user_id=user_id)
        )
    except (ActivityUser.DoesNotExist, DjangoValidationError):
        raise ParticipantNotFoundError("User is not a participant of this activity")

    if participant.user_id == activity.created_by_id:
        raise CannotChangeCreatorAdminError("The activity creator is always an admin")

    participant.is_admin = is_admin
    participant.save(update_fields=['is_admin'])
    return participant
