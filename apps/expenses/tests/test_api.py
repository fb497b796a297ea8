import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.expenses.models import Expense, Budget


@pytest.mark.django_db
class TestExpenseList:
    """Tests for GET /api/expenses/"""

    def test_list(self, authenticated_client, expenses):
        response = authenticated_client.get(reverse('expenses:expense-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 4
        assert response.data['results'][0]['date'] == '2024-04-01'

    def test_list_filtered(self, authenticated_client, expenses):
        response = authenticated_client.get(reverse('expenses:expense-list'), {
            'start_date': '2024-03-01',
            'end_date': '2024-03-31',
            'category': 'Food',
        })

        assert response.data['count'] == 2

    def test_list_invalid_range(self, authenticated_client):
        response = authenticated_client.get(reverse('expenses:expense-list'), {
            'start_date': '2024-04-01',
            'end_date': '2024-03-01',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_only_own(self, other_client, expenses):
        response = other_client.get(reverse('expenses:expense-list'))

        assert response.data['count'] == 0

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('expenses:expense-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestExpenseWrite:
    """Tests for creating, updating and deleting expenses."""

    def test_create(self, authenticated_client, user):
        response = authenticated_client.post(reverse('expenses:expense-list'), {
            'amount': '45.00',
            'category': 'Transport',
            'payment_method': 'UPI',
            'description': 'Cab',
            'date': '2024-05-02',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['amount'] == '45.00'
        assert Expense.objects.get(user=user).description == 'Cab'

    def test_create_invalid_category(self, authenticated_client):
        response = authenticated_client.post(reverse('expenses:expense-list'), {
            'amount': '45.00',
            'category': 'Travel',
            'payment_method': 'UPI',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'category' in response.data

    def test_create_non_positive_amount(self, authenticated_client):
        response = authenticated_client.post(reverse('expenses:expense-list'), {
            'amount': '0',
            'category': 'Food',
            'payment_method': 'Cash',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve_other_users_expense(self, other_client, expenses):
        url = reverse('expenses:expense-detail', kwargs={'pk': expenses[0].id})
        response = other_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_partial_update(self, authenticated_client, expenses):
        url = reverse('expenses:expense-detail', kwargs={'pk': expenses[0].id})
        response = authenticated_client.patch(url, {'description': 'Team lunch'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['description'] == 'Team lunch'
        assert response.data['amount'] == '100.00'

    def test_delete(self, authenticated_client, expenses):
        url = reverse('expenses:expense-detail', kwargs={'pk': expenses[0].id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert Expense.objects.count() == 3

    def test_delete_missing(self, authenticated_client):
        url = reverse('expenses:expense-detail', kwargs={'pk': uuid4()})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_sync(self, authenticated_client, user):
        response = authenticated_client.post(reverse('expenses:expense-sync'), {
            'expenses': [
                {'amount': '10.00', 'category': 'Food', 'payment_method': 'Cash', 'date': '2024-05-01'},
                {'amount': '20.00', 'category': 'Bills', 'payment_method': 'Card', 'date': '2024-05-02'},
            ]
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data) == 2
        assert Expense.objects.filter(user=user).count() == 2

    def test_sync_invalid_item_stores_nothing(self, authenticated_client, user):
        response = authenticated_client.post(reverse('expenses:expense-sync'), {
            'expenses': [
                {'amount': '10.00', 'category': 'Food', 'payment_method': 'Cash'},
                {'amount': '-1.00', 'category': 'Food', 'payment_method': 'Cash'},
            ]
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Expense.objects.filter(user=user).exists()


@pytest.mark.django_db
class TestExpenseAggregation:
    """Tests for GET /api/expenses/aggregation/"""

    def test_by_category(self, authenticated_client, expenses):
        response = authenticated_client.get(reverse('expenses:expense-aggregation'))

        assert response.status_code == status.HTTP_200_OK
        assert [(r['key'], r['total']) for r in response.data] == [
            ('Bills', '200.00'), ('Food', '150.00'), ('Transport', '30.00')
        ]

    def test_by_month(self, authenticated_client, expenses):
        response = authenticated_client.get(
            reverse('expenses:expense-aggregation'), {'group_by': 'month'}
        )

        assert [r['key'] for r in response.data] == ['2024-03', '2024-04']
        assert response.data[0]['count'] == 3

    def test_invalid_group_by(self, authenticated_client):
        response = authenticated_client.get(
            reverse('expenses:expense-aggregation'), {'group_by': 'week'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestBudgets:
    """Tests for /api/budgets/"""

    def test_create(self, authenticated_client, user):
        response = authenticated_client.post(reverse('expenses:budget-list'), {
            'category': 'Overall', 'limit': '2000.00', 'month': 3, 'year': 2024,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Budget.objects.get(user=user).limit == 2000

    def test_upsert_existing(self, authenticated_client, budget):
        response = authenticated_client.post(reverse('expenses:budget-list'), {
            'category': 'Food', 'limit': '350.00', 'month': 3, 'year': 2024,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(budget.id)
        assert response.data['limit'] == '350.00'

    def test_invalid_month(self, authenticated_client):
        response = authenticated_client.post(reverse('expenses:budget-list'), {
            'category': 'Food', 'limit': '350.00', 'month': 13, 'year': 2024,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_for_month(self, authenticated_client, budget):
        response = authenticated_client.get(
            reverse('expenses:budget-list'), {'month': 3, 'year': 2024}
        )

        assert response.status_code == status.HTTP_200_OK
        assert [b['id'] for b in response.data] == [str(budget.id)]

    def test_delete(self, authenticated_client, budget):
        url = reverse('expenses:budget-detail', kwargs={'pk': budget.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_delete_other_users_budget(self, other_client, budget):
        url = reverse('expenses:budget-detail', kwargs={'pk': budget.id})
        response = other_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert Budget.objects.filter(id=budget.id).exists()
