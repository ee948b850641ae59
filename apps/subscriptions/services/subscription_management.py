"""Plan upgrades and the admin side of bank-transfer subscription payments."""

import logging
from typing import Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.payments.models import SymbolPurpose
from apps.payments.services import reserve_payment_symbol

from ..models import (
    BillingCycle,
    SubscriptionPlan,
    SubscriptionStatus,
    SubscriptionStatusHistory,
    UserSubscription,
)
from .exceptions import (
    PlanNotFoundError,
    SubscriptionNotFoundError,
    InvalidSubscriptionStateError,
)

logger = logging.getLogger(__name__)

CYCLE_LENGTH = {
    BillingCycle.MONTHLY: relativedelta(months=1),
    BillingCycle.YEARLY: relativedelta(years=1),
}


def _start_period(subscription: UserSubscription) -> None:
    start = timezone.now()
    subscription.current_period_start = start
    subscription.current_period_end = start + CYCLE_LENGTH[subscription.billing_cycle]


def _start_paid_period(subscription: UserSubscription) -> None:
    """Start a new period with its own variable symbol."""
    _start_period(subscription)
    subscription.payment_symbol = reserve_payment_symbol(purpose=SymbolPurpose.SUBSCRIPTION)


def _record_status_change(subscription, *, old_status, new_status, reason, created_by) -> None:
    SubscriptionStatusHistory.objects.create(
        subscription=subscription,
        old_status=old_status,
        new_status=new_status,
        reason=reason,
        payment_symbol=subscription.payment_symbol,
        created_by=created_by
    )
    logger.info(
        "Subscription %s: %s -> %s (%s, VS %s)",
        subscription.id, old_status or '-', new_status, reason,
        subscription.variable_symbol or '-'
    )


def _lock_subscription(subscription_id: UUID) -> UserSubscription:
    try:
        return (
            UserSubscription.objects
            .select_for_update()
            .select_related('plan')
            .get(id=subscription_id)
        )
    except UserSubscription.DoesNotExist:
        raise SubscriptionNotFoundError(f"Subscription with ID {subscription_id} not found")


def get_active_plans() -> QuerySet:
    """Plans currently offered, cheapest first."""
    return SubscriptionPlan.objects.filter(is_active=True)


def get_current_subscription(*, user) -> Optional[UserSubscription]:
    """Return the user's subscription in any status, or None."""
    return (
        UserSubscription.objects
        .select_related('plan', 'payment_symbol')
        .prefetch_related('status_history__payment_symbol')
        .filter(user=user)
        .first()
    )


@transaction.atomic
def upgrade_subscription(
    *,
    user,
    plan_id: UUID,
    billing_cycle: str = BillingCycle.MONTHLY
) -> UserSubscription:
    """
    Switch the user to another plan.

    A plan that is free for the chosen cycle is active immediately. A paid
    plan waits in ``pending_payment`` until an admin confirms the bank
    transfer; every paid upgrade starts a new period with a fresh variable
    symbol for that transfer. The existing subscription, if any, is
    updated in place; its earlier symbols stay on the history rows.

    Args:
        user: Subscriber
        plan_id: Target plan
        billing_cycle: 'monthly' or 'yearly'

    Returns:
        Updated or created UserSubscription

    Raises:
        PlanNotFoundError: If the plan doesn't exist or isn't offered
        SymbolSpaceExhaustedError: If no variable symbol could be allocated
        UniquenessViolationError: If symbol inserts kept colliding
    """
    try:
        plan = SubscriptionPlan.objects.get(id=plan_id, is_active=True)
    except SubscriptionPlan.DoesNotExist:
        raise PlanNotFoundError(f"Plan with ID {plan_id} not found")

    subscription = (
        UserSubscription.objects
        .select_for_update()
        .filter(user=user)
        .first()
    )
    old_status = subscription.status if subscription else ''
    if subscription is None:
        subscription = UserSubscription(user=user)

    is_free = plan.is_free_for(billing_cycle)
    new_status = SubscriptionStatus.ACTIVE if is_free else SubscriptionStatus.PENDING_PAYMENT

    subscription.plan = plan
    subscription.billing_cycle = billing_cycle
    subscription.status = new_status

    if is_free:
        _start_period(subscription)
        subscription.payment_symbol = None
    else:
        _start_paid_period(subscription)

    subscription.save()

    if old_status != new_status or not is_free:
        _record_status_change(
            subscription,
            old_status=old_status,
            new_status=new_status,
            reason=f"Upgrade to {plan.name} ({billing_cycle})",
            created_by=user
        )

    return subscription


@transaction.atomic
def activate_subscription(*, subscription_id: UUID, admin_user, reason: str = '') -> UserSubscription:
    """
    Activate a subscription once its bank transfer has arrived.

    A canceled subscription can be reactivated as well; it starts a new
    billing period from now with a fresh variable symbol.

    Raises:
        SubscriptionNotFoundError: If the subscription doesn't exist
        InvalidSubscriptionStateError: If it is already active or its plan
            is free
    """
    subscription = _lock_subscription(subscription_id)
    old_status = subscription.status

    if old_status not in (SubscriptionStatus.PENDING_PAYMENT, SubscriptionStatus.CANCELED):
        raise InvalidSubscriptionStateError(
            f"Subscription cannot be activated from status '{old_status}'",
            current_status=old_status
        )
    if subscription.plan.is_free_for(subscription.billing_cycle):
        raise InvalidSubscriptionStateError(
            "Free plans do not require activation",
            current_status=old_status
        )

    if old_status == SubscriptionStatus.CANCELED:
        _start_paid_period(subscription)

    subscription.status = SubscriptionStatus.ACTIVE
    subscription.save()

    _record_status_change(
        subscription,
        old_status=old_status,
        new_status=SubscriptionStatus.ACTIVE,
        reason=reason or 'Payment received',
        created_by=admin_user
    )
    return subscription


@transaction.atomic
def cancel_subscription(*, subscription_id: UUID, admin_user, reason: str = '') -> UserSubscription:
    """
    Cancel an active or unpaid subscription.

    Raises:
        SubscriptionNotFoundError: If the subscription doesn't exist
        InvalidSubscriptionStateError: If it is already canceled
    """
    subscription = _lock_subscription(subscription_id)
    old_status = subscription.status

    if old_status == SubscriptionStatus.CANCELED:
        raise InvalidSubscriptionStateError(
            "Subscription is already canceled",
            current_status=old_status
        )

    subscription.status = SubscriptionStatus.CANCELED
    subscription.save(update_fields=['status', 'updated_at'])

    _record_status_change(
        subscription,
        old_status=old_status,
        new_status=SubscriptionStatus.CANCELED,
        reason=reason or 'Canceled by admin',
        created_by=admin_user
    )
    return subscription
