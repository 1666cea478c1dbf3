from decimal import Decimal

from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer

from .models import Expense, ExpenseShare, SplitType
from .services.split_calculation import ExpenseSplitService


# =============================================================================
# Input Serializers
# =============================================================================

class ExpenseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for expense filtering.

    Query Parameters:
        activity (UUID): Expenses of this activity; without it, expenses I
            paid or share in
    """

    activity = serializers.UUIDField(required=False)


class ShareInputSerializer(serializers.Serializer):
    """One entry of a percentage or amount split; give exactly one of the two."""

    user_id = serializers.UUIDField()
    percentage = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal('0.01'),
        max_value=Decimal('100.00'),
        required=False
    )
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False
    )

    def validate(self, attrs):
        if ('percentage' in attrs) == ('amount' in attrs):
            raise serializers.ValidationError('Give either percentage or amount.')
        return attrs


SHARE_KEYS = {
    SplitType.PERCENTAGE: 'percentage',
    SplitType.AMOUNT: 'amount',
}


def _check_shares(split_type, shares):
    """Shares must be present for percentage/amount splits and match their key."""
    if split_type == SplitType.EQUAL:
        if shares:
            raise serializers.ValidationError({
                'shares': 'Use participant_ids for an equal split.'
            })
        return

    if not shares:
        raise serializers.ValidationError({
            'shares': f'{split_type.capitalize()} split requires shares.'
        })

    key = SHARE_KEYS[split_type]
    if any(key not in share for share in shares):
        raise serializers.ValidationError({
            'shares': f'Every share of a {split_type} split needs a {key}.'
        })


class ExpenseCreateSerializer(serializers.Serializer):
    """
    Validate input for recording an expense.

    ``split_type='equal'`` splits among ``participant_ids`` (or every
    participant when omitted); ``split_type='percentage'`` and
    ``split_type='amount'`` require ``shares`` carrying percentages or
    amounts respectively.
    """

    activity = serializers.UUIDField()
    task = serializers.UUIDField(required=False, allow_null=True)
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    currency = serializers.RegexField(r'^[A-Za-z]{3}$', required=False)
    expense_date = serializers.DateTimeField(required=False)
    paid_by = serializers.UUIDField(required=False)
    split_type = serializers.ChoiceField(choices=SplitType.choices, default=SplitType.EQUAL)
    participant_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_empty=False
    )
    shares = ShareInputSerializer(many=True, required=False)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Name cannot be blank.')
        return value

    def validate(self, attrs):
        _check_shares(attrs.get('split_type', SplitType.EQUAL), attrs.get('shares'))
        return attrs


class ExpenseUpdateSerializer(serializers.Serializer):
    """
    All fields optional.

    Sending ``split_type``, ``participant_ids`` or ``shares`` rebuilds the
    share set; changing only ``amount`` rescales the existing shares by
    their stored percentages. Without ``split_type`` the split kind is
    taken from the shares (``amount`` or ``percentage`` entries).
    """

    task = serializers.UUIDField(required=False, allow_null=True)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False
    )
    currency = serializers.RegexField(r'^[A-Za-z]{3}$', required=False)
    expense_date = serializers.DateTimeField(required=False)
    paid_by = serializers.UUIDField(required=False)
    split_type = serializers.ChoiceField(choices=SplitType.choices, required=False)
    participant_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_empty=False
    )
    shares = ShareInputSerializer(many=True, required=False)

    def validate(self, attrs):
        shares = attrs.get('shares')
        if shares and 'split_type' not in attrs:
            # Infer the split from the first entry
            attrs['split_type'] = (
                SplitType.AMOUNT if 'amount' in shares[0] else SplitType.PERCENTAGE
            )
        if 'split_type' in attrs and attrs['split_type'] != SplitType.EQUAL:
            _check_shares(attrs['split_type'], shares)
        elif shares:
            _check_shares(SplitType.EQUAL, shares)
        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class ExpenseShareSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = ExpenseShare
        fields = [
            'id',
            'user',
            'share_amount',
            'share_percentage',
            'is_paid',
            'paid_at',
            'created_at',
        ]
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    """Expense with payer and shares."""

    paid_by = UserMinimalSerializer(read_only=True)
    shares = ExpenseShareSerializer(many=True, read_only=True)
    activity_name = serializers.CharField(source='activity.name', read_only=True)
    total_shares = serializers.SerializerMethodField()
    rounding_drift = serializers.SerializerMethodField()

    class Meta:
        model = Expense
        fields = [
            'id',
            'activity',
            'activity_name',
            'task',
            'name',
            'description',
            'amount',
            'currency',
            'expense_date',
            'paid_by',
            'split_type',
            'shares',
            'total_shares',
            'rounding_drift',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_total_shares(self, obj):
        total = sum((share.share_amount for share in obj.shares.all()), Decimal('0.00'))
        return str(total)

    def get_rounding_drift(self, obj):
        drift = ExpenseSplitService.rounding_drift(
            obj.amount, [share.share_amount for share in obj.shares.all()]
        )
        return str(drift)


class OutstandingShareSerializer(serializers.ModelSerializer):
    """Unpaid share together with what it is for and whom it is owed to."""

    expense_id = serializers.UUIDField(source='expense.id', read_only=True)
    expense_name = serializers.CharField(source='expense.name', read_only=True)
    currency = serializers.CharField(source='expense.currency', read_only=True)
    activity_id = serializers.UUIDField(source='expense.activity_id', read_only=True)
    activity_name = serializers.CharField(source='expense.activity.name', read_only=True)
    owed_to = UserMinimalSerializer(source='expense.paid_by', read_only=True)

    class Meta:
        model = ExpenseShare
        fields = [
            'id',
            'expense_id',
            'expense_name',
            'activity_id',
            'activity_name',
            'share_amount',
            'share_percentage',
            'currency',
            'owed_to',
        ]
        read_only_fields = fields


class ParticipantBalanceSerializer(serializers.Serializer):
    user = UserMinimalSerializer()
    paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    owed = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    unpaid = serializers.DecimalField(max_digits=14, decimal_places=2)


class ExpenseSummarySerializer(serializers.Serializer):
    activity_id = serializers.UUIDField()
    expense_count = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    unpaid_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    rounding_drift = serializers.DecimalField(max_digits=14, decimal_places=2)
    participants = ParticipantBalanceSerializer(many=True)


class MarkAllPaidResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    updated = serializers.IntegerField()
