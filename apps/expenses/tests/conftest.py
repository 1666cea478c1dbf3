import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.activities.services import create_activity, add_participant
from apps.expenses.services import create_expense


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
        name='Anna Creator',
    )


@pytest.fixture
def participant(db):
    return User.objects.create_user(
        email='bob@example.com',
        password='TestPass123!',
        name='Bob',
    )


@pytest.fixture
def second_participant(db):
    return User.objects.create_user(
        email='cecile@example.com',
        password='TestPass123!',
        name='Cecile',
    )


@pytest.fixture
def outsider(db):
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
def activity(creator, participant, second_participant):
    """Activity with three members: creator, participant, second_participant."""
    activity = create_activity(name='Road trip', created_by=creator)
    add_participant(activity=activity, user=participant)
    add_participant(activity=activity, user=second_participant)
    return activity


@pytest.fixture
def expense(activity, creator):
    """100.00 paid by the creator, split equally among all three members."""
    return create_expense(
        activity_id=activity.id,
        user=creator,
        name='Fuel',
        amount=Decimal('100.00'),
    )


@pytest.fixture
def creator_client(creator):
    return _authenticated(creator)


@pytest.fixture
def participant_client(participant):
    return _authenticated(participant)


@pytest.fixture
def second_client(second_participant):
    return _authenticated(second_participant)


@pytest.fixture
def outsider_client(outsider):
    return _authenticated(outsider)
