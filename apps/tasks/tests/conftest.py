import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.activities.services import create_activity, add_participant
from apps.tasks.services import create_task


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
def outsider(db):
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        name='Outsider',
    )


@pytest.fixture
def activity(creator, participant):
    activity = create_activity(name='House move', created_by=creator)
    add_participant(activity=activity, user=participant)
    return activity


@pytest.fixture
def task(activity, participant):
    """Task created by the participant and assigned to them."""
    return create_task(
        activity_id=activity.id,
        user=participant,
        name='Rent a van',
        assigned_to_id=participant.id,
    )


@pytest.fixture
def creator_client(creator):
    return _authenticated(creator)


@pytest.fixture
def participant_client(participant):
    return _authenticated(participant)


@pytest.fixture
def outsider_client(outsider):
    return _authenticated(outsider)
