"""Services for subscription plans, upgrades and invoice quotas."""

from .exceptions import (
    SubscriptionsServiceError,
    PlanNotFoundError,
    SubscriptionNotFoundError,
    InvalidSubscriptionStateError,
)
from .subscription_management import (
    get_active_plans,
    get_current_subscription,
    upgrade_subscription,
    activate_subscription,
    cancel_subscription,
)
from .invoice_limits import (
    get_monthly_invoice_limit,
    count_invoices_this_month,
    can_user_create_invoice,
)
from .payment_descriptor import get_subscription_payment_descriptor, render_subscription_qr

__all__ = [
    # Exceptions
    'SubscriptionsServiceError',
    'PlanNotFoundError',
    'SubscriptionNotFoundError',
    'InvalidSubscriptionStateError',
    # Plans and upgrades
    'get_active_plans',
    'get_current_subscription',
    'upgrade_subscription',
    'activate_subscription',
    'cancel_subscription',
    # Invoice quota
    'get_monthly_invoice_limit',
    'count_invoices_this_month',
    'can_user_create_invoice',
    # Payment
    'get_subscription_payment_descriptor',
    'render_subscription_qr',
]
