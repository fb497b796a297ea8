from decimal import Decimal
from rest_framework import serializers
from .models import GroupExpense, Split, SplitType
from apps.accounts.serializers import UserMinimalSerializer


class SplitSerializer(serializers.ModelSerializer):
    """Participant share of an expense."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Split
        fields = ['id', 'user', 'amount', 'is_paid', 'paid_at', 'version']
        read_only_fields = fields


class GroupExpenseSerializer(serializers.ModelSerializer):
    """Ledger entry with its splits."""

    paid_by = UserMinimalSerializer(read_only=True)
    splits = SplitSerializer(many=True, read_only=True)
    is_settlement = serializers.BooleanField(read_only=True)

    class Meta:
        model = GroupExpense
        fields = [
            'id',
            'group',
            'paid_by',
            'amount',
            'description',
            'category',
            'date',
            'split_type',
            'splits',
            'is_settlement',
            'created_at',
        ]
        read_only_fields = fields


class SplitEntrySerializer(serializers.Serializer):
    """One entry of an exact or percentage split."""

    user = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    percentage = serializers.DecimalField(max_digits=7, decimal_places=4, required=False)


class GroupExpenseCreateSerializer(serializers.Serializer):
    """Input for adding a group expense."""

    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    description = serializers.CharField(max_length=200)
    category = serializers.CharField(max_length=30, required=False, default='Other')
    date = serializers.DateField(required=False)
    split_type = serializers.ChoiceField(choices=SplitType.choices, default=SplitType.EQUAL)
    selected_members = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_empty=True
    )
    splits = SplitEntrySerializer(many=True, required=False)

    def validate(self, attrs):
        if attrs['split_type'] != SplitType.EQUAL and not attrs.get('splits'):
            raise serializers.ValidationError({
                'splits': f"Required for {attrs['split_type']} splits"
            })
        return attrs


class SettlementSerializer(serializers.Serializer):
    """Input for recording a settlement."""

    to_user = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )


class MarkPaidSerializer(serializers.Serializer):
    """Input for marking a split as paid."""

    user_id = serializers.UUIDField()
    version = serializers.IntegerField(required=False, min_value=0)


class BalanceSerializer(serializers.Serializer):
    user = UserMinimalSerializer()
    paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    owes = serializers.DecimalField(max_digits=14, decimal_places=2)
    net_balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class DebtSerializer(serializers.Serializer):
    from_user = UserMinimalSerializer()
    to_user = UserMinimalSerializer()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class GroupBalancesSerializer(serializers.Serializer):
    """Balances, simplified debts and ledger total."""

    balances = BalanceSerializer(many=True)
    debts = DebtSerializer(many=True)
    total_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)


class PendingExpenseSerializer(serializers.Serializer):
    expense_id = serializers.UUIDField()
    description = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_by = UserMinimalSerializer()


class PendingPaymentSerializer(serializers.Serializer):
    """Everything one member still owes in the group."""

    user = UserMinimalSerializer()
    total_owed = serializers.DecimalField(max_digits=14, decimal_places=2)
    expenses = PendingExpenseSerializer(many=True)
