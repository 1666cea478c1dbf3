"""
Domain-specific exceptions for activities app.

Raised by services and rendered by the API exception handler.
"""

from apps.core.exceptions import AccessDeniedError, InvalidOperationError, NotFoundError


class ActivityNotFoundError(NotFoundError):
    """Raised when an activity does not exist."""
    default_detail = 'Activity not found.'
    default_code = 'activity_not_found'


class ActivityAccessDeniedError(AccessDeniedError):
    """Raised when the user is neither creator nor participant."""
    default_detail = 'You do not have access to this activity.'
    default_code = 'activity_access_denied'


class InsufficientActivityPermissionsError(AccessDeniedError):
    """Raised when the user lacks the role required for an action."""
    default_detail = 'You do not have permission to manage this activity.'
    default_code = 'insufficient_permissions'


class InvalidDateRangeError(InvalidOperationError):
    """Raised when end date precedes start date."""
    default_detail = 'End date must be after start date.'
    default_code = 'invalid_date_range'


class ParticipantNotFoundError(NotFoundError):
    """Raised when the user is not a participant of the activity."""
    default_detail = 'Participant not found.'
    default_code = 'participant_not_found'


class AlreadyParticipantError(InvalidOperationError):
    """Raised when adding a user who already participates."""
    default_detail = 'User is already a participant.'
    default_code = 'already_participant'


class CannotRemoveCreatorError(InvalidOperationError):
    """Raised when attempting to remove the activity creator."""
    default_detail = 'The activity creator cannot be removed.'
    default_code = 'cannot_remove_creator'


class CannotChangeCreatorAdminError(InvalidOperationError):
    """Raised when attempting to revoke the creator's admin flag."""
    default_detail = "The activity creator's admin flag cannot be changed."
    default_code = 'cannot_change_creator_admin'
