"""
Service layer unit tests for accounts app.

Tests cover:
- Registration and email normalisation
- Authentication errors
- Admin-only user management
- Token revocation
"""

import pytest
from decimal import Decimal
from rest_framework_simplejwt.tokens import RefreshToken, AccessToken

from apps.accounts.models import User, UserRole
from apps.accounts.services import (
    register_user,
    authenticate_user,
    issue_tokens,
    revoke_refresh_token,
    update_user,
    delete_user,
    set_user_role,
    toggle_user_active,
    list_users,
    get_system_statistics,
)
from apps.accounts.services.exceptions import (
    EmailAlreadyExistsError,
    EmailTakenError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    InvalidRoleError,
    AdminRequiredError,
    CannotModifySelfError,
    UserNotFoundError,
)
from apps.activities.services import create_activity
from apps.expenses.services import create_expense


# =============================================================================
# Registration & Authentication
# =============================================================================

@pytest.mark.django_db
class TestRegistration:

    def test_register_stores_lowercase_email(self):
        """Email is stored lower-case so login is case-insensitive."""
        user = register_user(email='Mixed.Case@Example.COM', password='SecurePass123!', name='Mixed')

        assert user.email == 'mixed.case@example.com'
        assert user.role == UserRole.USER
        assert user.check_password('SecurePass123!')

    def test_register_duplicate_email_any_case(self, user):
        with pytest.raises(EmailAlreadyExistsError):
            register_user(email=user.email.upper(), password='SecurePass123!', name='Dup')

    def test_register_trims_name(self):
        user = register_user(email='trim@example.com', password='SecurePass123!', name='  Trimmed  ')
        assert user.name == 'Trimmed'


@pytest.mark.django_db
class TestAuthentication:

    def test_authenticate_success_sets_last_login(self, user):
        assert user.last_login is None

        authenticated = authenticate_user(email='TESTUSER@example.com', password='TestPass123!')

        assert authenticated.id == user.id
        assert authenticated.last_login is not None

    def test_authenticate_wrong_password(self, user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=user.email, password='wrong')

    def test_authenticate_unknown_email(self, db):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='nobody@example.com', password='whatever')

    def test_authenticate_inactive(self, user_inactive):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email=user_inactive.email, password='TestPass123!')

    def test_issued_tokens_carry_identity_claims(self, user):
        tokens = issue_tokens(user)
        access = AccessToken(tokens['access'])

        assert access['user_id'] == str(user.id)
        assert access['email'] == user.email
        assert access['name'] == user.name
        assert access['role'] == UserRole.USER

    def test_revoke_refresh_token_twice_fails(self, user):
        refresh = str(RefreshToken.for_user(user))

        revoke_refresh_token(token=refresh)

        with pytest.raises(InvalidTokenError):
            revoke_refresh_token(token=refresh)

    def test_revoke_garbage_token(self, db):
        with pytest.raises(InvalidTokenError):
            revoke_refresh_token(token='not-a-token')


# =============================================================================
# User Management
# =============================================================================

@pytest.mark.django_db
class TestUserManagement:

    def test_update_own_profile(self, user):
        updated = update_user(user_id=user.id, updated_by=user, name='New Name')
        assert updated.name == 'New Name'

    def test_blank_values_are_ignored(self, user):
        updated = update_user(user_id=user.id, updated_by=user, name='  ', email='')
        assert updated.name == 'Test User'
        assert updated.email == 'testuser@example.com'

    def test_cannot_update_other_user(self, user, other_user):
        with pytest.raises(AdminRequiredError):
            update_user(user_id=other_user.id, updated_by=user, name='Hacked')

    def test_admin_can_update_other_user(self, admin_user, user):
        updated = update_user(user_id=user.id, updated_by=admin_user, email='Changed@Example.com')
        assert updated.email == 'changed@example.com'

    def test_email_taken(self, user, other_user):
        with pytest.raises(EmailTakenError):
            update_user(user_id=user.id, updated_by=user, email=other_user.email)

    def test_list_users_requires_admin(self, user, admin_user):
        with pytest.raises(AdminRequiredError):
            list_users(requested_by=user)
        assert list_users(requested_by=admin_user).count() == 2

    def test_set_role(self, admin_user, user):
        updated = set_user_role(user_id=user.id, role='Admin', updated_by=admin_user)
        assert updated.role == UserRole.ADMIN
        assert updated.is_system_admin

    def test_set_invalid_role(self, admin_user, user):
        with pytest.raises(InvalidRoleError):
            set_user_role(user_id=user.id, role='superhero', updated_by=admin_user)

    def test_admin_cannot_demote_self(self, admin_user):
        with pytest.raises(CannotModifySelfError):
            set_user_role(user_id=admin_user.id, role='user', updated_by=admin_user)

    def test_toggle_active(self, admin_user, user):
        assert toggle_user_active(user_id=user.id, updated_by=admin_user).is_active is False
        assert toggle_user_active(user_id=user.id, updated_by=admin_user).is_active is True

    def test_delete_user(self, admin_user, user):
        delete_user(user_id=user.id, deleted_by=admin_user)
        assert not User.objects.filter(id=user.id).exists()

    def test_delete_missing_user(self, admin_user):
        with pytest.raises(UserNotFoundError):
            delete_user(user_id='00000000-0000-0000-0000-000000000000', deleted_by=admin_user)

    def test_non_admin_cannot_delete(self, user, other_user):
        with pytest.raises(AdminRequiredError):
            delete_user(user_id=other_user.id, deleted_by=user)


@pytest.mark.django_db
class TestSystemStatistics:

    def test_statistics(self, admin_user, user):
        activity = create_activity(name='Trip', created_by=user)
        create_expense(activity_id=activity.id, user=user, name='Fuel', amount=Decimal('40.00'))

        stats = get_system_statistics(requested_by=admin_user)

        assert stats['total_users'] == 2
        assert stats['active_users'] == 2
        assert stats['total_activities'] == 1
        assert stats['total_tasks'] == 0
        assert stats['total_expenses'] == 1
        assert stats['total_expense_amount'] == Decimal('40.00')

    def test_statistics_requires_admin(self, user):
        with pytest.raises(AdminRequiredError):
            get_system_statistics(requested_by=user)
