from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'expenses'

router = DefaultRouter()
router.register(r'expenses', views.ExpenseViewSet, basename='expense')
router.register(r'budgets', views.BudgetViewSet, basename='budget')
router.register(r'templates', views.TemplateViewSet, basename='template')
router.register(r'goals', views.GoalViewSet, basename='goal')

urlpatterns = [
    # Expense routes
    # GET/POST          /api/expenses/               - List / create
    # GET/PATCH/DELETE  /api/expenses/{id}/          - Detail / update / delete
    # POST              /api/expenses/sync/          - Offline batch upload
    # GET               /api/expenses/aggregation/   - Totals by category/day/month

    # Budget routes
    # GET/POST  /api/budgets/        - List / upsert
    # DELETE    /api/budgets/{id}/   - Delete

    # Template routes
    # GET/POST          /api/templates/             - List / create
    # GET/PATCH/DELETE  /api/templates/{id}/        - Detail / update / delete
    # POST              /api/templates/{id}/use/    - Record an expense from it
    # GET               /api/templates/frequent/    - Top five used

    # Goal routes
    # GET/POST          /api/goals/                                 - List / create
    # GET/PATCH/DELETE  /api/goals/{id}/                            - Detail / update / delete
    # POST              /api/goals/{id}/contribute/                 - Add a contribution
    # DELETE            /api/goals/{id}/contributions/{cid}/        - Remove a contribution
    # GET               /api/goals/stats/summary/                   - Totals
    path('', include(router.urls)),
]
