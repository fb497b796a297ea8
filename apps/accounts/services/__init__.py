"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InactiveAccountError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .profile_management import update_profile

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'EmailAlreadyRegisteredError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    # Services
    'register_user',
    'authenticate_user',
    'update_profile',
]
