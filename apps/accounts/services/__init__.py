"""Services for accounts business logic."""

from .exceptions import (
    EmailAlreadyExistsError,
    EmailTakenError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
    InvalidRoleError,
    AdminRequiredError,
    CannotModifySelfError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, issue_tokens, revoke_refresh_token
from .user_management import (
    get_user_by_id,
    list_users,
    update_user,
    delete_user,
    set_user_role,
    toggle_user_active,
)
from .system_statistics import get_system_statistics

__all__ = [
    # Exceptions
    'EmailAlreadyExistsError',
    'EmailTakenError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    'UserNotFoundError',
    'InvalidRoleError',
    'AdminRequiredError',
    'CannotModifySelfError',
    # Services
    'register_user',
    'authenticate_user',
    'issue_tokens',
    'revoke_refresh_token',
    'get_user_by_id',
    'list_users',
    'update_user',
    'delete_user',
    'set_user_role',
    'toggle_user_active',
    'get_system_statistics',
]
