"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class EmailAlreadyRegisteredError(AccountsServiceError):
    """Raised when registering an email that already has an account."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    pass


class InactiveAccountError(AccountsServiceError):
    pass
