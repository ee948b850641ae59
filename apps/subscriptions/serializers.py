from rest_framework import serializers

from .models import BillingCycle, SubscriptionPlan, UserSubscription, SubscriptionStatusHistory


class SubscriptionPlanSerializer(serializers.ModelSerializer):

    class Meta:
        model = SubscriptionPlan
        fields = ['id', 'name', 'description', 'price_monthly', 'price_yearly', 'invoice_limit']
        read_only_fields = fields


class SubscriptionStatusHistorySerializer(serializers.ModelSerializer):
    variable_symbol = serializers.CharField(source='payment_symbol.value', read_only=True, allow_null=True)

    class Meta:
        model = SubscriptionStatusHistory
        fields = ['old_status', 'new_status', 'reason', 'variable_symbol', 'created_at']
        read_only_fields = fields


class UserSubscriptionSerializer(serializers.ModelSerializer):
    """Subscription with its plan, price and payment reference."""

    plan = SubscriptionPlanSerializer(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    variable_symbol = serializers.CharField(read_only=True, allow_null=True)
    status_history = SubscriptionStatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = UserSubscription
        fields = [
            'id',
            'plan',
            'status',
            'billing_cycle',
            'price',
            'variable_symbol',
            'current_period_start',
            'current_period_end',
            'status_history',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class UpgradeSubscriptionSerializer(serializers.Serializer):
    plan_id = serializers.UUIDField()
    billing_cycle = serializers.ChoiceField(choices=BillingCycle.choices, default=BillingCycle.MONTHLY)


class AdminSubscriptionActionSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class SubscriptionPaymentSerializer(serializers.Serializer):
    spayd = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    currency = serializers.CharField()
    variable_symbol = serializers.CharField()
    plan = serializers.CharField()
    recipient = serializers.CharField()
