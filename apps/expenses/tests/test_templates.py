import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.expenses.models import Expense, Template, ExpenseCategory, PaymentMethod
from apps.expenses.services import (
    list_templates,
    list_frequent_templates,
    create_template,
    update_template,
    delete_template,
    use_template,
    TemplateNotFoundError,
)


def _template(user, name, uses=0):
    return Template.objects.create(
        user=user,
        name=name,
        amount=Decimal('10.00'),
        category=ExpenseCategory.FOOD,
        payment_method=PaymentMethod.CASH,
        usage_count=uses,
        last_used=timezone.now() if uses else None,
    )


# =============================================================================
# Services
# =============================================================================

@pytest.mark.django_db
class TestTemplateServices:

    def test_create_template_default_icon(self, user):
        template = create_template(
            user=user,
            name='Rent',
            amount=Decimal('900.00'),
            category=ExpenseCategory.BILLS,
            payment_method=PaymentMethod.NET_BANKING,
            icon='',
        )

        assert template.icon == '📋'
        assert template.usage_count == 0
        assert template.last_used is None

    def test_list_most_used_first(self, user, other_user):
        _template(user, 'Coffee', uses=1)
        _template(user, 'Lunch', uses=7)
        _template(user, 'Never used')
        _template(other_user, 'Not mine', uses=50)

        names = [t.name for t in list_templates(user=user)]

        assert names == ['Lunch', 'Coffee', 'Never used']

    def test_frequent_skips_unused_and_caps_at_five(self, user):
        for uses in range(1, 8):
            _template(user, f'T{uses}', uses=uses)
        _template(user, 'Never used')

        frequent = list(list_frequent_templates(user=user))

        assert [t.name for t in frequent] == ['T7', 'T6', 'T5', 'T4', 'T3']

    def test_update_keeps_omitted_fields(self, template, user):
        updated = update_template(template_id=template.id, user=user, amount=Decimal('50.00'), icon='')

        assert updated.amount == Decimal('50.00')
        assert updated.name == 'Metro pass'
        assert updated.icon == '📋'

    def test_update_clears_description(self, template, user):
        updated = update_template(template_id=template.id, user=user, description='')

        assert updated.description == ''

    def test_update_other_users_template(self, template, other_user):
        with pytest.raises(TemplateNotFoundError):
            update_template(template_id=template.id, user=other_user, name='Mine now')

    def test_delete(self, template, user):
        delete_template(template_id=template.id, user=user)

        assert not Template.objects.filter(id=template.id).exists()

    def test_delete_missing(self, user):
        with pytest.raises(TemplateNotFoundError):
            delete_template(template_id=uuid4(), user=user)

    def test_use_creates_expense_from_template(self, template, user):
        expense, used = use_template(template_id=template.id, user=user)

        assert expense.user == user
        assert expense.amount == Decimal('45.00')
        assert expense.category == ExpenseCategory.TRANSPORT
        assert expense.payment_method == PaymentMethod.UPI
        assert expense.description == 'Daily commute'
        assert expense.date == timezone.localdate()
        assert used.usage_count == 1
        assert used.last_used is not None

    def test_use_with_overrides(self, template, user):
        expense, _ = use_template(
            template_id=template.id,
            user=user,
            amount=Decimal('60.00'),
            description='Airport trip',
            date=date(2024, 3, 9),
        )

        assert expense.amount == Decimal('60.00')
        assert expense.description == 'Airport trip'
        assert expense.date == date(2024, 3, 9)
        # Category and method are never overridden
        assert expense.category == ExpenseCategory.TRANSPORT

    def test_use_counts_every_time(self, template, user):
        use_template(template_id=template.id, user=user)
        _, used = use_template(template_id=template.id, user=user)

        assert used.usage_count == 2
        assert Expense.objects.filter(user=user).count() == 2

    def test_use_other_users_template(self, template, other_user):
        with pytest.raises(TemplateNotFoundError):
            use_template(template_id=template.id, user=other_user)

        assert Expense.objects.count() == 0


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestTemplateAPI:
    """Tests for /api/templates/"""

    def test_create(self, authenticated_client):
        response = authenticated_client.post(reverse('expenses:template-list'), {
            'name': '  Rent  ',
            'amount': '900.00',
            'category': 'Bills',
            'payment_method': 'NetBanking',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Rent'
        assert response.data['icon'] == '📋'
        assert response.data['usage_count'] == 0

    def test_create_invalid_category(self, authenticated_client):
        response = authenticated_client.post(reverse('expenses:template-list'), {
            'name': 'Rent',
            'amount': '900.00',
            'category': 'Rent',
            'payment_method': 'Cash',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_only_own(self, other_client, template):
        response = other_client.get(reverse('expenses:template-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_update(self, authenticated_client, template):
        url = reverse('expenses:template-detail', kwargs={'pk': template.id})
        response = authenticated_client.patch(url, {'amount': '48.50'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount'] == '48.50'
        assert response.data['name'] == 'Metro pass'

    def test_delete(self, authenticated_client, template):
        url = reverse('expenses:template-detail', kwargs={'pk': template.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_delete_other_users(self, other_client, template):
        url = reverse('expenses:template-detail', kwargs={'pk': template.id})
        response = other_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert Template.objects.filter(id=template.id).exists()

    def test_use(self, authenticated_client, template):
        url = reverse('expenses:template-use', kwargs={'pk': template.id})
        response = authenticated_client.post(url, {'amount': '52.00'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['expense']['amount'] == '52.00'
        assert response.data['expense']['category'] == 'Transport'
        assert response.data['template']['id'] == str(template.id)
        assert response.data['template']['usage_count'] == 1

    def test_use_missing(self, authenticated_client):
        url = reverse('expenses:template-use', kwargs={'pk': uuid4()})
        response = authenticated_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_frequent(self, authenticated_client, user, template):
        _template(user, 'Groceries', uses=3)

        response = authenticated_client.get(reverse('expenses:template-frequent'))

        assert response.status_code == status.HTTP_200_OK
        assert [t['name'] for t in response.data] == ['Groceries']

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('expenses:template-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
