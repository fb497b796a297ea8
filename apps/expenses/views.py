from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .serializers import (
    ExpenseSerializer,
    ExpenseUpdateSerializer,
    ExpenseSyncSerializer,
    ExpenseFilterSerializer,
    AggregationQuerySerializer,
    AggregationRowSerializer,
    BudgetSerializer,
    BudgetQuerySerializer,
    TemplateSerializer,
    TemplateUpdateSerializer,
    TemplateUseSerializer,
    TemplateUseResultSerializer,
    GoalSerializer,
    GoalUpdateSerializer,
    ContributionSerializer,
    GoalSummarySerializer,
)
from apps.expenses.services import (
    list_expenses,
    get_expense,
    create_expense,
    update_expense,
    delete_expense,
    sync_expenses,
    aggregate_expenses,
    list_budgets,
    upsert_budget,
    delete_budget,
    list_templates,
    list_frequent_templates,
    get_template,
    create_template,
    update_template,
    delete_template,
    use_template,
    list_goals,
    get_goal,
    create_goal,
    update_goal,
    delete_goal,
    add_contribution,
    remove_contribution,
    get_goal_summary,
    # Exceptions
    ExpenseNotFoundError,
    BudgetNotFoundError,
    TemplateNotFoundError,
    GoalNotFoundError,
    ContributionNotFoundError,
    InvalidContributionError,
)


UUID_PATTERN = '[0-9a-fA-F-]{36}'


class ExpensePagination(PageNumberPagination):
    """Expense pages default to fifty rows."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class ExpenseViewSet(viewsets.ViewSet):
    """
    Personal expenses of the current user.

    list: Expenses filtered by date range, category, payment method
    create: Add an expense
    retrieve: Get one expense
    partial_update / update: Change an expense
    destroy: Delete an expense
    sync: Upload a batch recorded offline
    aggregation: Totals by category, day or month
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(
        parameters=[ExpenseFilterSerializer],
        responses={200: ExpenseSerializer(many=True)},
    )
    def list(self, request):
        query_serializer = ExpenseFilterSerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        expenses = list_expenses(user=request.user, **query_serializer.validated_data)

        paginator = ExpensePagination()
        page = paginator.paginate_queryset(expenses, request)
        return paginator.get_paginated_response(ExpenseSerializer(page, many=True).data)

    @extend_schema(request=ExpenseSerializer, responses={201: ExpenseSerializer})
    def create(self, request):
        serializer = ExpenseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        expense = create_expense(user=request.user, **serializer.validated_data)
        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ExpenseSerializer})
    def retrieve(self, request, pk=None):
        try:
            expense = get_expense(expense_id=pk, user=request.user)
        except ExpenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(request=ExpenseUpdateSerializer, responses={200: ExpenseSerializer})
    def update(self, request, pk=None):
        serializer = ExpenseUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            expense = update_expense(expense_id=pk, user=request.user, **serializer.validated_data)
        except ExpenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ExpenseSerializer(expense).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            delete_expense(expense_id=pk, user=request.user)
        except ExpenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ExpenseSyncSerializer, responses={201: ExpenseSerializer(many=True)})
    @action(detail=False, methods=['post'])
    def sync(self, request):
        """Sync multiple expenses from offline storage."""
        serializer = ExpenseSyncSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        created = sync_expenses(user=request.user, expenses=serializer.validated_data['expenses'])
        return Response(ExpenseSerializer(created, many=True).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter('group_by', OpenApiTypes.STR, description="'category', 'day' or 'month'", default='category'),
            OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)'),
            OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)'),
        ],
        responses={200: AggregationRowSerializer(many=True)},
    )
    @action(detail=False, methods=['get'])
    def aggregation(self, request):
        """Get expense aggregation by date/category."""
        query_serializer = AggregationQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        rows = aggregate_expenses(user=request.user, **query_serializer.validated_data)
        return Response(AggregationRowSerializer(rows, many=True).data)


class BudgetViewSet(viewsets.ViewSet):
    """
    Monthly budgets of the current user.

    list: Budgets, optionally for ?month=&year=
    create: Create or update the budget for a category and month
    destroy: Delete a budget
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(parameters=[BudgetQuerySerializer], responses={200: BudgetSerializer(many=True)})
    def list(self, request):
        query_serializer = BudgetQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        budgets = list_budgets(user=request.user, **query_serializer.validated_data)
        return Response(BudgetSerializer(budgets, many=True).data)

    @extend_schema(request=BudgetSerializer, responses={200: BudgetSerializer, 201: BudgetSerializer})
    def create(self, request):
        serializer = BudgetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        budget, created = upsert_budget(user=request.user, **serializer.validated_data)
        return Response(
            BudgetSerializer(budget).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def destroy(self, request, pk=None):
        try:
            delete_budget(budget_id=pk, user=request.user)
        except BudgetNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TemplateViewSet(viewsets.ViewSet):
    """
    Reusable expense templates of the current user.

    list: All templates, most used first
    create: Save a template
    retrieve / update / partial_update / destroy: One template
    use: Record an expense from a template
    frequent: Top five templates that have been used
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(responses={200: TemplateSerializer(many=True)})
    def list(self, request):
        templates = list_templates(user=request.user)
        return Response(TemplateSerializer(templates, many=True).data)

    @extend_schema(request=TemplateSerializer, responses={201: TemplateSerializer})
    def create(self, request):
        serializer = TemplateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        template = create_template(user=request.user, **serializer.validated_data)
        return Response(TemplateSerializer(template).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: TemplateSerializer})
    def retrieve(self, request, pk=None):
        try:
            template = get_template(template_id=pk, user=request.user)
        except TemplateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(TemplateSerializer(template).data)

    @extend_schema(request=TemplateUpdateSerializer, responses={200: TemplateSerializer})
    def update(self, request, pk=None):
        serializer = TemplateUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            template = update_template(template_id=pk, user=request.user, **serializer.validated_data)
        except TemplateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(TemplateSerializer(template).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            delete_template(template_id=pk, user=request.user)
        except TemplateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=TemplateUseSerializer, responses={201: TemplateUseResultSerializer})
    @action(detail=True, methods=['post'])
    def use(self, request, pk=None):
        """Create an expense from a template."""
        serializer = TemplateUseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            expense, template = use_template(template_id=pk, user=request.user, **serializer.validated_data)
        except TemplateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        result = TemplateUseResultSerializer({'expense': expense, 'template': template})
        return Response(result.data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: TemplateSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def frequent(self, request):
        """Most frequently used templates."""
        templates = list_frequent_templates(user=request.user)
        return Response(TemplateSerializer(templates, many=True).data)


class GoalViewSet(viewsets.ViewSet):
    """
    Savings goals of the current user.

    list: Open goals first, then completed
    create: Start a goal
    retrieve / update / partial_update / destroy: One goal
    contribute: Add money to a goal
    delete_contribution: Take a contribution back out
    summary: Totals across all goals
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(responses={200: GoalSerializer(many=True)})
    def list(self, request):
        goals = list_goals(user=request.user)
        return Response(GoalSerializer(goals, many=True).data)

    @extend_schema(request=GoalSerializer, responses={201: GoalSerializer})
    def create(self, request):
        serializer = GoalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        goal = create_goal(user=request.user, **serializer.validated_data)
        return Response(GoalSerializer(goal).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: GoalSerializer})
    def retrieve(self, request, pk=None):
        try:
            goal = get_goal(goal_id=pk, user=request.user)
        except GoalNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(GoalSerializer(goal).data)

    @extend_schema(request=GoalUpdateSerializer, responses={200: GoalSerializer})
    def update(self, request, pk=None):
        serializer = GoalUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            goal = update_goal(goal_id=pk, user=request.user, **serializer.validated_data)
        except GoalNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(GoalSerializer(goal).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            delete_goal(goal_id=pk, user=request.user)
        except GoalNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ContributionSerializer, responses={200: GoalSerializer})
    @action(detail=True, methods=['post'])
    def contribute(self, request, pk=None):
        """Add a contribution to a goal."""
        serializer = ContributionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            goal = add_contribution(goal_id=pk, user=request.user, **serializer.validated_data)
        except GoalNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidContributionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(GoalSerializer(goal).data)

    @extend_schema(responses={200: GoalSerializer})
    @action(
        detail=True,
        methods=['delete'],
        url_path=f'contributions/(?P<contribution_id>{UUID_PATTERN})',
        url_name='remove-contribution',
    )
    def delete_contribution(self, request, pk=None, contribution_id=None):
        """Remove a contribution and give its amount back."""
        try:
            goal = remove_contribution(goal_id=pk, contribution_id=contribution_id, user=request.user)
        except (GoalNotFoundError, ContributionNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(GoalSerializer(goal).data)

    @extend_schema(responses={200: GoalSummarySerializer})
    @action(detail=False, methods=['get'], url_path='stats/summary', url_name='summary')
    def summary(self, request):
        """Totals across all of the user's goals."""
        return Response(GoalSummarySerializer(get_goal_summary(user=request.user)).data)
