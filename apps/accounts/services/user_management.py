"""
User management service.

Self-service profile updates plus the administrator operations
(role changes, activation toggling, deletion).
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole

from .exceptions import (
    AdminRequiredError,
    CannotModifySelfError,
    EmailTakenError,
    InvalidRoleError,
    UserNotFoundError,
)

User = get_user_model()
logger = logging.getLogger(__name__)


def _require_admin(user: User) -> None:
    if not user.is_system_admin:
        raise AdminRequiredError("Administrator role required")


def _is_same_user(user_id, user: User) -> bool:
    return str(user_id).lower() == str(user.id)


def _get_user_for_update(user_id: UUID) -> User:
    try:
        return (
            User.objects
            .select_for_update()
            .get(id=user_id)
        )
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")


def get_user_by_id(*, user_id: UUID) -> User:
    """
    Get a user by ID.

    Raises:
        UserNotFoundError: If user doesn't exist
    """
    try:
        return User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")


def list_users(*, requested_by: User) -> QuerySet:
    """All users, admin only."""
    _require_admin(requested_by)
    return User.objects.all().order_by('name', 'email')


@transaction.atomic
def update_user(
    *,
    user_id: UUID,
    updated_by: User,
    name: Optional[str] = None,
    email: Optional[str] = None
) -> User:
    """
    Update a user's name and/or email.

    Users may edit themselves; admins may edit anyone. Blank values are
    ignored so partial updates never wipe a field.

    Raises:
        UserNotFoundError: If user doesn't exist
        AdminRequiredError: If editing someone else without admin role
        EmailTakenError: If the new email belongs to another user
    """
    user = _get_user_for_update(user_id)

    if user.id != updated_by.id and not updated_by.is_system_admin:
        raise AdminRequiredError("You can only update your own profile")

    update_fields = []

    if name is not None and name.strip():
        user.name = name.strip()
        update_fields.append('name')

    if email is not None and email.strip():
        normalized = User.objects.normalize_email(email)
        if normalized != user.email:
            if User.objects.filter(email=normalized).exclude(id=user.id).exists():
                raise EmailTakenError(f"Email {normalized} is already taken")
            user.email = normalized
            update_fields.append('email')

    if update_fields:
        update_fields.append('updated_at')
        user.save(update_fields=update_fields)

    return user


@transaction.atomic
def delete_user(*, user_id: UUID, deleted_by: User) -> None:
    """
    Permanently delete a user (admin only).

    Activities created by the user are removed with them.

    Raises:
        AdminRequiredError: If deleted_by is not an admin
        CannotModifySelfError: If an admin tries to delete their own account
        UserNotFoundError: If user doesn't exist
    """
    _require_admin(deleted_by)

    if _is_same_user(user_id, deleted_by):
        raise CannotModifySelfError("Administrators cannot delete their own account")

    user = _get_user_for_update(user_id)
    user.delete()

    logger.info("User %s deleted by admin %s", user_id, deleted_by.id)


@transaction.atomic
def set_user_role(*, user_id: UUID, role: str, updated_by: User) -> User:
    """
    Change a user's system role (admin only).

    Raises:
        AdminRequiredError: If updated_by is not an admin
        InvalidRoleError: If role is not "admin" or "user"
        CannotModifySelfError: If an admin tries to demote themselves
        UserNotFoundError: If user doesn't exist
    """
    _require_admin(updated_by)

    role = (role or '').strip().lower()
    if role not in UserRole.values:
        raise InvalidRoleError(f"Invalid role '{role}'. Must be 'admin' or 'user'")

    if _is_same_user(user_id, updated_by) and role != UserRole.ADMIN:
        raise CannotModifySelfError("Administrators cannot demote themselves")

    user = _get_user_for_update(user_id)
    user.role = role
    user.save(update_fields=['role', 'updated_at'])

    logger.info("User %s role set to %s by %s", user.id, role, updated_by.id)
    return user


@transaction.atomic
def toggle_user_active(*, user_id: UUID, updated_by: User) -> User:
    """
    Flip a user's active flag (admin only).

    Raises:
        AdminRequiredError: If updated_by is not an admin
        CannotModifySelfError: If an admin tries to deactivate themselves
        UserNotFoundError: If user doesn't exist
    """
    _require_admin(updated_by)

    if _is_same_user(user_id, updated_by):
        raise CannotModifySelfError("Administrators cannot deactivate themselves")

    user = _get_user_for_update(user_id)
    user.is_active = not user.is_active
    user.save(update_fields=['is_active', 'updated_at'])

    logger.info(
        "User %s %s by %s",
        user.id,
        'activated' if user.is_active else 'deactivated',
        updated_by.id,
    )
    return user
