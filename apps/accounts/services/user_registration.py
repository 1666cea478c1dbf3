"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import EmailAlreadyExistsError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    name: str
) -> User:
    """
    Register a new user account.

    Args:
        email: User's email address (stored lower-case)
        password: User's password (will be hashed)
        name: Display name, 2-100 characters

    Returns:
        Created User instance

    Raises:
        EmailAlreadyExistsError: If the email is already registered
    """
    email = User.objects.normalize_email(email)

    if User.objects.filter(email=email).exists():
        raise EmailAlreadyExistsError(f"A user with email {email} already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name.strip()
        )
    except IntegrityError:
        # Concurrent registration with the same email
        raise EmailAlreadyExistsError(f"A user with email {email} already exists")

    logger.info("Registered user %s", user.id)
    return user
