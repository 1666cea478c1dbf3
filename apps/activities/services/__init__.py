"""
Activities services.

Exports all public service functions and exceptions.
"""

from .exceptions import (
    ActivityNotFoundError,
    ActivityAccessDeniedError,
    InsufficientActivityPermissionsError,
    InvalidDateRangeError,
    ParticipantNotFoundError,
    AlreadyParticipantError,
    CannotRemoveCreatorError,
    CannotChangeCreatorAdminError,
)
from .access import (
    has_activity_access,
    is_activity_admin,
    get_activity_or_404,
    get_accessible_activity,
)
from .activity_management import (
    create_activity,
    update_activity,
    delete_activity,
    get_activity,
    list_user_activities,
    list_all_activities,
)
from .participant_management import (
    get_participants,
    add_participant,
    remove_participant,
    set_participant_admin,
)

__all__ = [
    # Exceptions
    'ActivityNotFoundError',
    'ActivityAccessDeniedError',
    'InsufficientActivityPermissionsError',
    'InvalidDateRangeError',
    'ParticipantNotFoundError',
    'AlreadyParticipantError',
    'CannotRemoveCreatorError',
    'CannotChangeCreatorAdminError',
    # Access
    'has_activity_access',
    'is_activity_admin',
    'get_activity_or_404',
    'get_accessible_activity',
    # Activity management
    'create_activity',
    'update_activity',
    'delete_activity',
    'get_activity',
    'list_user_activities',
    'list_all_activities',
    # Participants
    'get_participants',
    'add_participant',
    'remove_participant',
    'set_participant_admin',
]
