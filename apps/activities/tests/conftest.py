import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.activities.services import create_activity, add_participant


def _authenticated(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def creator(db):
    """User who creates the activity."""
    return User.objects.create_user(
        email='creator@example.com',
        password='TestPass123!',
        name='Activity Creator',
    )


@pytest.fixture
def participant(db):
    """Regular participant of the activity."""
    return User.objects.create_user(
        email='participant@example.com',
        password='TestPass123!',
        name='Participant',
    )


@pytest.fixture
def second_participant(db):
    return User.objects.create_user(
        email='second@example.com',
        password='TestPass123!',
        name='Second Participant',
    )


@pytest.fixture
def outsider(db):
    """User with no relation to the activity."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        name='Outsider',
    )


@pytest.fixture
def system_admin(db):
    return User.objects.create_user(
        email='sysadmin@example.com',
        password='TestPass123!',
        name='System Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def activity(creator, participant):
    """Activity with its creator and one participant."""
    activity = create_activity(
        name='Weekend in the Alps',
        created_by=creator,
        description='Hiking trip',
        location='Chamonix',
    )
    add_participant(activity=activity, user=participant)
    return activity


@pytest.fixture
def creator_client(creator):
    return _authenticated(creator)


@pytest.fixture
def participant_client(participant):
    return _authenticated(participant)


@pytest.fixture
def outsider_client(outsider):
    return _authenticated(outsider)


@pytest.fixture
def admin_client(system_admin):
    return _authenticated(system_admin)
