from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import (
    GroupExpenseSerializer,
    GroupExpenseCreateSerializer,
    SettlementSerializer,
    MarkPaidSerializer,
    GroupBalancesSerializer,
    PendingPaymentSerializer,
)
from apps.notifications.serializers import NotificationSerializer

from apps.groups.services import GroupNotFoundError
from apps.ledger.services import (
    add_group_expense,
    list_group_expenses,
    get_balances,
    record_settlement,
    mark_split_paid,
    get_pending_payments,
    send_payment_reminder,
    # Exceptions
    InvalidSplitPolicyError,
    EmptyParticipantSetError,
    SplitSumMismatchError,
    InvalidSettlementError,
    ExpenseNotFoundError,
    SplitNotFoundError,
    SplitAlreadyPaidError,
    SplitVersionConflictError,
    NoPendingPaymentsError,
    InsufficientPermissionsError,
    LedgerPersistenceError,
)


class LedgerPagination(PageNumberPagination):
    """Pagination for group ledgers."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


@extend_schema(
    request=GroupExpenseCreateSerializer,
    responses={200: GroupExpenseSerializer(many=True), 201: GroupExpenseSerializer},
    description="List the group's ledger (GET) or add an expense (POST).",
    tags=['ledger'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def group_expenses(request, group_id):
    """List or add group expenses."""
    if request.method == 'GET':
        try:
            expenses = list_group_expenses(group_id=group_id, user=request.user)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        paginator = LedgerPagination()
        page = paginator.paginate_queryset(expenses, request)
        serializer = GroupExpenseSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    serializer = GroupExpenseCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        expense = add_group_expense(
            group_id=group_id,
            payer=request.user,
            amount=data['amount'],
            description=data['description'],
            split_type=data['split_type'],
            category=data.get('category', 'Other'),
            date=data.get('date'),
            selected_members=data.get('selected_members'),
            splits=[dict(entry) for entry in data.get('splits', [])],
        )
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (InvalidSplitPolicyError, EmptyParticipantSetError, SplitSumMismatchError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except LedgerPersistenceError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(GroupExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: GroupBalancesSerializer},
    description="Member balances, simplified debts and the ledger total.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_balances(request, group_id):
    """Calculate who owes whom."""
    try:
        result = get_balances(group_id=group_id, user=request.user)
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(GroupBalancesSerializer(result).data)


@extend_schema(
    request=SettlementSerializer,
    responses={201: GroupExpenseSerializer},
    description="Record a payment from the current user to another member.",
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def settle(request, group_id):
    """Record a settlement between users."""
    serializer = SettlementSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        settlement = record_settlement(
            group_id=group_id,
            from_user=request.user,
            to_user_id=serializer.validated_data['to_user'],
            amount=serializer.validated_data['amount'],
        )
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidSettlementError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except LedgerPersistenceError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(GroupExpenseSerializer(settlement).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=MarkPaidSerializer,
    responses={200: GroupExpenseSerializer},
    description="Mark a participant's split as paid (payer or admin).",
    tags=['ledger'],
)
@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated])
def mark_paid(request, group_id, expense_id):
    """Mark a split as paid."""
    serializer = MarkPaidSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        expense = mark_split_paid(
            group_id=group_id,
            expense_id=expense_id,
            user_id=serializer.validated_data['user_id'],
            marked_by=request.user,
            version=serializer.validated_data.get('version'),
        )
    except (GroupNotFoundError, ExpenseNotFoundError, SplitNotFoundError) as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except SplitVersionConflictError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    except SplitAlreadyPaidError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except LedgerPersistenceError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(GroupExpenseSerializer(expense).data)


@extend_schema(
    responses={200: PendingPaymentSerializer(many=True)},
    description="Unpaid splits grouped by member, for reminders.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pending_payments(request, group_id):
    """Get pending payments for reminders."""
    try:
        pending = get_pending_payments(group_id=group_id, user=request.user)
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(PendingPaymentSerializer(list(pending.values()), many=True).data)


@extend_schema(
    request=None,
    responses={200: NotificationSerializer},
    description="Send a payment reminder to a member who owes money.",
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def remind(request, group_id, user_id):
    """Send payment reminder to a user."""
    try:
        notification = send_payment_reminder(
            group_id=group_id,
            from_user=request.user,
            to_user_id=user_id,
        )
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NoPendingPaymentsError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Reminder sent successfully',
        'notification': NotificationSerializer(notification).data,
    })
