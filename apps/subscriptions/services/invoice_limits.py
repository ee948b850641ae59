"""Monthly invoice quota per subscription plan."""

from typing import Optional

from django.conf import settings
from django.utils import timezone

from apps.invoices.models import Invoice

from ..models import SubscriptionStatus, UserSubscription


def get_monthly_invoice_limit(user) -> Optional[int]:
    """
    Invoices the user may create per calendar month.

    Users without an active, unexpired subscription get
    ``settings.FREE_INVOICE_LIMIT``. None means unlimited.
    """
    subscription = (
        UserSubscription.objects
        .select_related('plan')
        .filter(
            user=user,
            status=SubscriptionStatus.ACTIVE,
            current_period_end__gt=timezone.now()
        )
        .first()
    )
    if subscription is None:
        return settings.FREE_INVOICE_LIMIT
    return subscription.plan.invoice_limit


def count_invoices_this_month(user) -> int:
    """Invoices created since the first day of the current month, canceled ones included."""
    month_start = timezone.localdate().replace(day=1)
    return Invoice.objects.filter(user=user, created_at__date__gte=month_start).count()


def can_user_create_invoice(user) -> bool:
    limit = get_monthly_invoice_limit(user)
    if limit is None:
        return True
    return count_invoices_this_month(user) < limit
