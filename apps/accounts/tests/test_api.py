import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('auth:register')
        data = {
            'email': 'NewUser@example.com',
            'name': 'New User',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['email'] == 'newuser@example.com'
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('auth:register')
        data = {
            'email': user.email,
            'name': 'Dup',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'email_exists'

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('auth:register')
        data = {
            'email': 'mismatch@example.com',
            'name': 'Mismatch',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data['details']

    def test_register_short_password(self, api_client):
        """Passwords shorter than six characters are rejected."""
        url = reverse('auth:register')
        data = {
            'email': 'short@example.com',
            'name': 'Short',
            'password': 'Ab1!',
            'password_confirm': 'Ab1!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data['details']

    def test_register_name_too_short(self, api_client):
        url = reverse('auth:register')
        data = {
            'email': 'n@example.com',
            'name': 'N',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Login / Logout / Refresh
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        url = reverse('auth:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['email'] == user.email

    def test_login_wrong_password(self, api_client, user):
        url = reverse('auth:login')
        response = api_client.post(url, {'email': user.email, 'password': 'Nope123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'invalid_credentials'
        assert response.data['status'] == 401

    def test_login_inactive(self, api_client, user_inactive):
        url = reverse('auth:login')
        response = api_client.post(url, {'email': user_inactive.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'account_inactive'


@pytest.mark.django_db
class TestTokenLifecycle:

    def test_logout_revokes_refresh_token(self, authenticated_client, user):
        refresh = str(RefreshToken.for_user(user))

        response = authenticated_client.post(reverse('auth:logout'), {'refresh': refresh})
        assert response.status_code == status.HTTP_200_OK

        response = authenticated_client.post(reverse('auth:token-refresh'), {'refresh': refresh})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_invalid_token(self, authenticated_client):
        response = authenticated_client.post(reverse('auth:logout'), {'refresh': 'garbage'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'invalid_token'

    def test_refresh_rotates_token(self, api_client, user):
        refresh = str(RefreshToken.for_user(user))

        response = api_client.post(reverse('auth:token-refresh'), {'refresh': refresh})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert response.data['refresh'] != refresh

        # Old token was blacklisted by the rotation
        response = api_client.post(reverse('auth:token-refresh'), {'refresh': refresh})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_requires_authentication(self, api_client):
        response = api_client.get(reverse('auth:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'not_authenticated'

    def test_me(self, authenticated_client, user):
        response = authenticated_client.get(reverse('auth:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(user.id)


# =============================================================================
# Users Endpoints
# =============================================================================

@pytest.mark.django_db
class TestUsersApi:
    """Tests for /api/users/"""

    def test_list_requires_admin(self, authenticated_client):
        response = authenticated_client.get(reverse('users:user-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_lists_users(self, admin_client, user):
        response = admin_client.get(reverse('users:user-list'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2

    def test_profile(self, authenticated_client, user):
        response = authenticated_client.get(reverse('users:user-profile'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email

    def test_retrieve_user(self, authenticated_client, other_user):
        url = reverse('users:user-detail', kwargs={'pk': other_user.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Other User'

    def test_retrieve_missing_user(self, authenticated_client):
        url = reverse('users:user-detail', kwargs={'pk': '00000000-0000-0000-0000-000000000000'})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'user_not_found'

    def test_update_self(self, authenticated_client, user):
        url = reverse('users:user-detail', kwargs={'pk': user.id})
        response = authenticated_client.put(url, {'name': 'Renamed'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Renamed'

    def test_update_other_forbidden(self, authenticated_client, other_user):
        url = reverse('users:user-detail', kwargs={'pk': other_user.id})
        response = authenticated_client.put(url, {'name': 'Renamed'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_email_taken(self, authenticated_client, user, other_user):
        url = reverse('users:user-detail', kwargs={'pk': user.id})
        response = authenticated_client.patch(url, {'email': other_user.email})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'email_taken'

    def test_admin_changes_role(self, admin_client, user):
        url = reverse('users:user-role', kwargs={'pk': user.id})
        response = admin_client.put(url, {'role': 'Admin'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.role == UserRole.ADMIN

    def test_invalid_role(self, admin_client, user):
        url = reverse('users:user-role', kwargs={'pk': user.id})
        response = admin_client.put(url, {'role': 'Owner'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'invalid_role'

    def test_toggle_active(self, admin_client, user):
        url = reverse('users:user-toggle-active', kwargs={'pk': user.id})
        response = admin_client.put(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_active'] is False

    def test_delete_user(self, admin_client, user):
        url = reverse('users:user-detail', kwargs={'pk': user.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not User.objects.filter(id=user.id).exists()

    def test_statistics_admin_only(self, authenticated_client, admin_client):
        assert authenticated_client.get(reverse('users:user-statistics')).status_code == status.HTTP_403_FORBIDDEN

        response = admin_client.get(reverse('users:user-statistics'))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_users'] == 2

    def test_admin_lists_all_activities(self, admin_client, user):
        from apps.activities.services import create_activity
        create_activity(name='Someone elses trip', created_by=user)

        response = admin_client.get(reverse('users:user-activities'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
