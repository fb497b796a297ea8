"""Credential checks for login."""

import logging

from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()
logger = logging.getLogger(__name__)


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp the login time.

    Unknown emails and wrong passwords produce the same error.

    Raises:
        InvalidCredentialsError: If the email or password is wrong
        InactiveAccountError: If the account has been deactivated
    """
    user = User.objects.filter(email=email.strip().lower()).first()

    if user is None or not user.check_password(password):
        logger.warning("Failed login attempt")
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    User.objects.filter(pk=user.pk).update(last_login=timezone.now())
    user.refresh_from_db(fields=['last_login'])
    return user
