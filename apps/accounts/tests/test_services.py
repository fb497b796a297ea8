import pytest
from apps.accounts.models import User
from apps.accounts.services import (
    register_user,
    authenticate_user,
    update_profile,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InactiveAccountError,
)


@pytest.mark.django_db
class TestRegisterUser:

    def test_normalizes_email_and_currency(self):
        user = register_user(
            email=' Someone@Example.COM ', password='StrongPass123!', currency='usd'
        )

        assert user.email == 'someone@example.com'
        assert user.currency == 'USD'
        assert user.check_password('StrongPass123!')

    def test_duplicate_email(self, user):
        with pytest.raises(EmailAlreadyRegisteredError):
            register_user(email='TESTUSER@example.com', password='StrongPass123!')

        assert User.objects.count() == 1


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_sets_last_login(self, user):
        authenticated = authenticate_user(email='testuser@example.com', password='TestPass123!')

        assert authenticated == user
        assert authenticated.last_login is not None

    def test_wrong_password(self, user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='testuser@example.com', password='nope')

    def test_inactive(self, user_inactive):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email='inactive@example.com', password='TestPass123!')


@pytest.mark.django_db
class TestUpdateProfile:

    def test_update(self, user):
        update_profile(user=user, display_name='New Name', currency='eur')

        user.refresh_from_db()
        assert user.display_name == 'New Name'
        assert user.currency == 'EUR'

    def test_no_changes(self, user):
        update_profile(user=user)

        user.refresh_from_db()
        assert user.display_name == 'Test User'

    def test_display_name_fallback(self, user):
        update_profile(user=user, display_name='')

        assert user.get_display_name() == 'testuser'
