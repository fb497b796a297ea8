"""Account registration."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import DEFAULT_CURRENCY
from .exceptions import EmailAlreadyRegisteredError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    currency: str = DEFAULT_CURRENCY
) -> User:
    """
    Create an account. Emails are compared case-insensitively.

    Raises:
        EmailAlreadyRegisteredError: If the email already has an account
    """
    email = email.strip().lower()
    if User.objects.filter(email=email).exists():
        raise EmailAlreadyRegisteredError("A user with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name.strip(),
            currency=currency.upper(),
        )
    except IntegrityError:
        # Lost a race with a concurrent registration
        raise EmailAlreadyRegisteredError("A user with this email already exists")

    logger.info("Registered user %s", user.id)
    return user
