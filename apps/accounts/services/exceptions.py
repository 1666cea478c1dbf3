"""Domain-specific exceptions for accounts services."""

from apps.core.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    InvalidOperationError,
    NotFoundError,
)


class EmailAlreadyExistsError(InvalidOperationError):
    """Raised when registering with an email that is already in use."""
    default_detail = 'A user with this email already exists.'
    default_code = 'email_exists'


class EmailTakenError(InvalidOperationError):
    """Raised when changing an email to one owned by another user."""
    default_detail = 'This email is already taken by another user.'
    default_code = 'email_taken'


class InvalidCredentialsError(AuthenticationError):
    """Raised when authentication credentials are invalid."""
    default_detail = 'Invalid email or password.'
    default_code = 'invalid_credentials'


class InactiveAccountError(AccessDeniedError):
    """Raised when account is deactivated."""
    default_detail = 'Account is deactivated.'
    default_code = 'account_inactive'


class InvalidTokenError(InvalidOperationError):
    """Raised when a refresh token is malformed, expired or revoked."""
    default_detail = 'Invalid or expired token.'
    default_code = 'invalid_token'


class UserNotFoundError(NotFoundError):
    """Raised when user does not exist."""
    default_detail = 'User not found.'
    default_code = 'user_not_found'


class InvalidRoleError(InvalidOperationError):
    """Raised when assigning a role outside of the known set."""
    default_detail = 'Role must be either "admin" or "user".'
    default_code = 'invalid_role'


class AdminRequiredError(AccessDeniedError):
    """Raised when a non-admin calls an admin-only operation."""
    default_detail = 'Administrator role required.'
    default_code = 'admin_required'


class CannotModifySelfError(InvalidOperationError):
    """Raised when an admin tries to demote, deactivate or delete themselves."""
    default_detail = 'You cannot perform this action on your own account.'
    default_code = 'cannot_modify_self'
