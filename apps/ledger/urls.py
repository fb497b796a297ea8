from django.urls import path
from . import views

app_name = 'ledger'

# Mounted under /api/groups/ next to the groups router
urlpatterns = [
    # GET  /api/groups/{id}/expenses/   - Group ledger
    # POST /api/groups/{id}/expenses/   - Add expense
    path('<uuid:group_id>/expenses/', views.group_expenses, name='group-expenses'),
    path(
        '<uuid:group_id>/expenses/<uuid:expense_id>/mark-paid/',
        views.mark_paid,
        name='mark-paid'
    ),
    path('<uuid:group_id>/balances/', views.group_balances, name='balances'),
    path('<uuid:group_id>/settle/', views.settle, name='settle'),
    path('<uuid:group_id>/pending/', views.pending_payments, name='pending'),
    path('<uuid:group_id>/remind/<uuid:user_id>/', views.remind, name='remind'),
]
