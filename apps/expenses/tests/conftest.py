import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.expenses.models import Expense, Budget, Template, Goal, ExpenseCategory, PaymentMethod


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='user@example.com',
        password='TestPass123!',
        display_name='Test User',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


@pytest.fixture
def authenticated_client(user):
    return _client_for(user)


@pytest.fixture
def other_client(other_user):
    return _client_for(other_user)


@pytest.fixture
def expenses(user):
    """Four expenses across two months and three categories."""
    rows = [
        (Decimal('100.00'), ExpenseCategory.FOOD, PaymentMethod.CARD, date(2024, 3, 5)),
        (Decimal('50.00'), ExpenseCategory.FOOD, PaymentMethod.CASH, date(2024, 3, 5)),
        (Decimal('30.00'), ExpenseCategory.TRANSPORT, PaymentMethod.UPI, date(2024, 3, 20)),
        (Decimal('200.00'), ExpenseCategory.BILLS, PaymentMethod.NET_BANKING, date(2024, 4, 1)),
    ]
    return [
        Expense.objects.create(
            user=user,
            amount=amount,
            category=category,
            payment_method=method,
            date=day,
            description=f'{category} on {day}',
        )
        for amount, category, method, day in rows
    ]


@pytest.fixture
def budget(user):
    return Budget.objects.create(
        user=user,
        category=ExpenseCategory.FOOD,
        limit=Decimal('300.00'),
        month=3,
        year=2024,
    )


@pytest.fixture
def template(user):
    return Template.objects.create(
        user=user,
        name='Metro pass',
        amount=Decimal('45.00'),
        category=ExpenseCategory.TRANSPORT,
        payment_method=PaymentMethod.UPI,
        description='Daily commute',
    )


@pytest.fixture
def goal(user):
    return Goal.objects.create(
        user=user,
        name='New laptop',
        target_amount=Decimal('1000.00'),
    )
