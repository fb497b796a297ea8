"""Profile updates for the current user."""

from typing import Optional

from django.contrib.auth import get_user_model

User = get_user_model()


def update_profile(
    *,
    user: User,
    display_name: Optional[str] = None,
    currency: Optional[str] = None
) -> User:
    """Change the display name and/or currency; omitted fields keep their value."""
    update_fields = []

    if display_name is not None:
        user.display_name = display_name.strip()
        update_fields.append('display_name')

    if currency is not None:
        user.currency = currency.upper()
        update_fields.append('currency')

    if update_fields:
        user.save(update_fields=update_fields)

    return user
