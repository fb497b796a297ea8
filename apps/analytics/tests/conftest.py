import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.expenses.models import Expense, Budget, ExpenseCategory, PaymentMethod, OVERALL_BUDGET


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def _expense(user, amount, category, day):
    return Expense.objects.create(
        user=user,
        amount=Decimal(amount),
        category=category,
        payment_method=PaymentMethod.CARD,
        date=day,
    )


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def analytics_user(db):
    """Create the main analytics test user."""
    return User.objects.create_user(
        email='analytics_user@example.com',
        password='TestPass123!',
        display_name='Analytics User',
    )


@pytest.fixture
def analytics_outsider(db):
    """Create a user with no expenses."""
    return User.objects.create_user(
        email='analytics_outsider@example.com',
        password='TestPass123!',
        display_name='Analytics Outsider',
    )


@pytest.fixture
def analytics_user_client(analytics_user):
    return _client_for(analytics_user)


@pytest.fixture
def analytics_outsider_client(analytics_outsider):
    return _client_for(analytics_outsider)


@pytest.fixture
def two_months_of_spending(analytics_user):
    """
    February 2024: Food 100, Transport 50 (total 150)
    March 2024:    Food 150, Transport 40, Bills 60 (total 250)
    """
    user = analytics_user
    return [
        _expense(user, '60.00', ExpenseCategory.FOOD, date(2024, 2, 3)),
        _expense(user, '40.00', ExpenseCategory.FOOD, date(2024, 2, 29)),
        _expense(user, '50.00', ExpenseCategory.TRANSPORT, date(2024, 2, 10)),
        _expense(user, '150.00', ExpenseCategory.FOOD, date(2024, 3, 1)),
        _expense(user, '40.00', ExpenseCategory.TRANSPORT, date(2024, 3, 15)),
        _expense(user, '60.00', ExpenseCategory.BILLS, date(2024, 3, 31)),
        # Outside both months
        _expense(user, '999.00', ExpenseCategory.FOOD, date(2024, 4, 1)),
    ]


@pytest.fixture
def march_budgets(analytics_user):
    """Food budget exceeded, overall budget at 83.3%."""
    return [
        Budget.objects.create(
            user=analytics_user, category=ExpenseCategory.FOOD,
            limit=Decimal('120.00'), month=3, year=2024,
        ),
        Budget.objects.create(
            user=analytics_user, category=OVERALL_BUDGET,
            limit=Decimal('300.00'), month=3, year=2024,
        ),
    ]
