import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.activities.services import create_activity, add_participant
from apps.invitations.services import create_invitation


def _authenticated(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def creator(db):
    return User.objects.create_user(
        email='creator@example.com',
        password='TestPass123!',
        name='Activity Creator',
    )


@pytest.fixture
def participant(db):
    return User.objects.create_user(
        email='participant@example.com',
        password='TestPass123!',
        name='Participant',
    )


@pytest.fixture
def invitee(db):
    return User.objects.create_user(
        email='invitee@example.com',
        password='TestPass123!',
        name='Invitee',
    )


@pytest.fixture
def outsider(db):
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        name='Outsider',
    )


@pytest.fixture
def activity(creator, participant):
    activity = create_activity(name='Board game night', created_by=creator)
    add_participant(activity=activity, user=participant)
    return activity


@pytest.fixture
def invitation(activity, participant, invitee):
    """Pending invitation sent by the participant."""
    return create_invitation(
        activity_id=activity.id,
        invited_by=participant,
        email=invitee.email,
        message='Join us!',
    )


@pytest.fixture
def creator_client(creator):
    return _authenticated(creator)


@pytest.fixture
def participant_client(participant):
    return _authenticated(participant)


@pytest.fixture
def invitee_client(invitee):
    return _authenticated(invitee)


@pytest.fixture
def outsider_client(outsider):
    return _authenticated(outsider)
