from django.contrib import admin

from .models import SubscriptionPlan, UserSubscription, SubscriptionStatusHistory, SubscriptionStatus
from .services import activate_subscription, InvalidSubscriptionStateError


@admin.register(SubscriptionPlan)
class SubscriptionPlanAdmin(admin.ModelAdmin):
    list_display = ['name', 'price_monthly', 'price_yearly', 'invoice_limit', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name']


class SubscriptionStatusHistoryInline(admin.TabularInline):
    model = SubscriptionStatusHistory
    extra = 0
    readonly_fields = ['old_status', 'new_status', 'reason', 'payment_symbol', 'created_by', 'created_at']
    can_delete = False


@admin.register(UserSubscription)
class UserSubscriptionAdmin(admin.ModelAdmin):
    list_display = [
        'user',
        'plan',
        'status',
        'billing_cycle',
        'variable_symbol',
        'current_period_end',
    ]
    list_filter = ['status', 'billing_cycle', 'plan']
    search_fields = ['user__email', 'payment_symbol__value']
    raw_id_fields = ['user']
    readonly_fields = ['payment_symbol', 'created_at', 'updated_at']
    inlines = [SubscriptionStatusHistoryInline]
    actions = ['confirm_payments']

    @admin.action(description='Confirm bank payment and activate')
    def confirm_payments(self, request, queryset):
        activated = skipped = 0
        for subscription in queryset.filter(status=SubscriptionStatus.PENDING_PAYMENT):
            try:
                activate_subscription(subscription_id=subscription.id, admin_user=request.user)
            except InvalidSubscriptionStateError:
                skipped += 1
                continue
            activated += 1
        msg = f"Activated {activated} subscription(s)."
        if skipped:
            msg += f" Skipped {skipped} on a free plan."
        self.message_user(request, msg)

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'plan', 'payment_symbol')
