"""Domain-specific exceptions for invitations app."""

from apps.core.exceptions import AccessDeniedError, InvalidOperationError, NotFoundError


class InvitationNotFoundError(NotFoundError):
    """Raised when an invitation does not exist or is not visible to the user."""
    default_detail = 'Invitation not found.'
    default_code = 'invitation_not_found'


class InviteeNotFoundError(InvalidOperationError):
    """Raised when no user matches the invited email or ID."""
    default_detail = 'No user with this email exists.'
    default_code = 'user_not_found'


class CannotInviteSelfError(InvalidOperationError):
    default_detail = 'You cannot invite yourself.'
    default_code = 'cannot_invite_self'


class CannotInviteCreatorError(InvalidOperationError):
    default_detail = 'The activity creator is already part of the activity.'
    default_code = 'user_is_creator'


class AlreadyParticipantInviteError(InvalidOperationError):
    default_detail = 'User is already a participant of this activity.'
    default_code = 'already_member'


class InvitationExistsError(InvalidOperationError):
    """Raised when a pending invitation for the same user already exists."""
    default_detail = 'A pending invitation already exists for this user.'
    default_code = 'invitation_exists'


class InvitationAlreadyRespondedError(InvalidOperationError):
    """Raised when acting on an invitation that is no longer pending."""
    default_detail = 'This invitation has already been responded to.'
    default_code = 'already_responded'


class InvitationPermissionError(AccessDeniedError):
    """Raised when the user may not invite to or manage the activity."""
    default_detail = 'You do not have permission to manage invitations for this activity.'
    default_code = 'invitation_permission_denied'
