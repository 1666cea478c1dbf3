"""
Invitation management service.

Invitations are the only way to join an activity: any member can invite a
registered user by email, the invitee accepts or rejects, and acceptance
creates the participant row in the same transaction.
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.activities.services import (
    add_participant,
    get_accessible_activity,
    get_activity_or_404,
)
from apps.invitations.models import Invitation, InvitationStatus

from .exceptions import (
    AlreadyParticipantInviteError,
    CannotInviteCreatorError,
    CannotInviteSelfError,
    InvitationAlreadyRespondedError,
    InvitationExistsError,
    InvitationNotFoundError,
    InvitationPermissionError,
    InviteeNotFoundError,
)

logger = logging.getLogger(__name__)


def _invitations_with_relations() -> QuerySet:
    return Invitation.objects.select_related('activity', 'invited_by', 'invited_user')


def _find_invitee(email: Optional[str], user_id: Optional[UUID]) -> User:
    try:
        if user_id is not None:
            return User.objects.get(id=user_id)
        return User.objects.get(email__iexact=(email or '').strip())
    except (User.DoesNotExist, DjangoValidationError):
        raise InviteeNotFoundError(f"No user found for {email or user_id}")


@transaction.atomic
def create_invitation(
    *,
    activity_id: UUID,
    invited_by: User,
    email: Optional[str] = None,
    user_id: Optional[UUID] = None,
    message: str = ""
) -> Invitation:
    """
    Invite a registered user to an activity.

    Args:
        activity_id: UUID of the activity
        invited_by: User sending the invitation (creator, participant or
            system admin)
        email: Invitee's email, matched case-insensitively
        user_id: Invitee's ID, alternative to email
        message: Optional note for the invitee

    Returns:
        Created Invitation instance

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        InvitationPermissionError: If invited_by has no access
        InviteeNotFoundError: If no user matches
        CannotInviteSelfError: If inviting oneself
        CannotInviteCreatorError: If inviting the activity creator
        AlreadyParticipantInviteError: If invitee already participates
        InvitationExistsError: If a pending invitation already exists
    """
    activity = get_activity_or_404(activity_id, for_update=True)

    if not (activity.has_access(invited_by) or invited_by.is_system_admin):
        raise InvitationPermissionError("Only activity members can send invitations")

    invitee = _find_invitee(email, user_id)

    if invitee.id == invited_by.id:
        raise CannotInviteSelfError("You cannot invite yourself")
    if activity.is_creator(invitee):
        raise CannotInviteCreatorError("The activity creator cannot be invited")
    if activity.has_participant(invitee):
        raise AlreadyParticipantInviteError(f"{invitee.email} is already a participant")

    if Invitation.objects.filter(
        activity=activity,
        invited_user=invitee,
        status=InvitationStatus.PENDING
    ).exists():
        raise InvitationExistsError(f"{invitee.email} already has a pending invitation")

    try:
        with transaction.atomic():
            invitation = Invitation.objects.create(
                activity=activity,
                invited_by=invited_by,
                invited_user=invitee,
                message=(message or "").strip(),
            )
    except IntegrityError:
        # Partial unique constraint caught a concurrent invitation
        raise InvitationExistsError(f"{invitee.email} already has a pending invitation")

    logger.info(
        "Invitation %s sent to %s for activity %s",
        invitation.id, invitee.id, activity.id
    )
    return invitation


def _get_pending_for_update(invitation_id: UUID, **filters) -> Invitation:
    try:
        invitation = (
            Invitation.objects
            .select_for_update()
            .select_related('activity', 'invited_by', 'invited_user')
            .get(id=invitation_id, **filters)
        )
    except (Invitation.DoesNotExist, DjangoValidationError):
        raise InvitationNotFoundError(f"Invitation with ID {invitation_id} not found")

    if not invitation.is_pending:
        raise InvitationAlreadyRespondedError(
            f"Invitation has already been {invitation.status}"
        )
    return invitation


@transaction.atomic
def respond_to_invitation(*, invitation_id: UUID, user: User, accept: bool) -> Invitation:
    """
    Accept or reject an invitation addressed to the user.

    Acceptance adds the user as a regular (non-admin) participant.

    Raises:
        InvitationNotFoundError: If the invitation doesn't exist or belongs
            to another user
        InvitationAlreadyRespondedError: If it is no longer pending
    """
    invitation = _get_pending_for_update(invitation_id, invited_user=user)

    if accept:
        if not invitation.activity.has_participant(user):
            add_participant(activity=invitation.activity, user=user, is_admin=False)
        invitation.resolve(InvitationStatus.ACCEPTED)
    else:
        invitation.resolve(InvitationStatus.REJECTED)

    logger.info("Invitation %s %s by %s", invitation.id, invitation.status, user.id)
    return invitation


@transaction.atomic
def cancel_invitation(*, invitation_id: UUID, user: User) -> Invitation:
    """
    Withdraw a pending invitation.

    Allowed for the inviter and the activity creator.

    Raises:
        InvitationNotFoundError: If the invitation doesn't exist
        InvitationAlreadyRespondedError: If it is no longer pending
        InvitationPermissionError: If user is neither inviter nor creator
    """
    invitation = _get_pending_for_update(invitation_id)

    if invitation.invited_by_id != user.id and not invitation.activity.is_creator(user):
        raise InvitationPermissionError(
            "Only the inviter or the activity creator can cancel this invitation"
        )

    invitation.resolve(InvitationStatus.CANCELLED)
    logger.info("Invitation %s cancelled by %s", invitation.id, user.id)
    return invitation


def get_invitation(*, invitation_id: UUID, user: User) -> Invitation:
    """
    Get an invitation visible to the user.

    Visible to the invitee, the inviter and members of the activity.
    Anyone else gets a not-found error.
    """
    try:
        invitation = _invitations_with_relations().get(id=invitation_id)
    except (Invitation.DoesNotExist, DjangoValidationError):
        raise InvitationNotFoundError(f"Invitation with ID {invitation_id} not found")

    if user.id in (invitation.invited_user_id, invitation.invited_by_id):
        return invitation
    if invitation.activity.has_access(user) or user.is_system_admin:
        return invitation

    raise InvitationNotFoundError(f"Invitation with ID {invitation_id} not found")


def list_my_invitations(*, user: User, status: Optional[str] = None) -> QuerySet:
    """Invitations received by the user, newest first."""
    queryset = _invitations_with_relations().filter(invited_user=user)
    if status:
        queryset = queryset.filter(status=status)
    return queryset


def list_pending_invitations(*, user: User) -> QuerySet:
    """Pending invitations received by the user."""
    return list_my_invitations(user=user, status=InvitationStatus.PENDING)


def list_sent_invitations(*, user: User) -> QuerySet:
    """Invitations the user sent."""
    return _invitations_with_relations().filter(invited_by=user)


def list_activity_invitations(
    *,
    activity_id: UUID,
    user: User,
    status: Optional[str] = None
) -> QuerySet:
    """
    All invitations of an activity.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user is not creator, participant or admin
    """
    activity = get_accessible_activity(activity_id, user, allow_system_admin=True)
    queryset = _invitations_with_relations().filter(activity=activity)
    if status:
        queryset = queryset.filter(status=status)
    return queryset

