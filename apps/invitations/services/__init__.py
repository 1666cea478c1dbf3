"""Services for invitations business logic."""

from .exceptions import (
    InvitationNotFoundError,
    InviteeNotFoundError,
    CannotInviteSelfError,
    CannotInviteCreatorError,
    AlreadyParticipantInviteError,
    InvitationExistsError,
    InvitationAlreadyRespondedError,
    InvitationPermissionError,
)
from .invitation_management import (
    create_invitation,
    respond_to_invitation,
    cancel_invitation,
    get_invitation,
    list_my_invitations,
    list_pending_invitations,
    list_sent_invitations,
    list_activity_invitations,
)

__all__ = [
    # Exceptions
    'InvitationNotFoundError',
    'InviteeNotFoundError',
    'CannotInviteSelfError',
    'CannotInviteCreatorError',
    'AlreadyParticipantInviteError',
    'InvitationExistsError',
    'InvitationAlreadyRespondedError',
    'InvitationPermissionError',
    # Services
    'create_invitation',
    'respond_to_invitation',
    'cancel_invitation',
    'get_invitation',
    'list_my_invitations',
    'list_pending_invitations',
    'list_sent_invitations',
    'list_activity_invitations',
]
