"""QR payment data for subscriptions awaiting a bank transfer."""

import logging

from django.conf import settings

from apps.payments.services import build_spayd, render_qr_png

from ..models import SubscriptionStatus
from .exceptions import SubscriptionNotFoundError, InvalidSubscriptionStateError
from .subscription_management import get_current_subscription

logger = logging.getLogger(__name__)


def get_subscription_payment_descriptor(*, user) -> dict:
    """
    Build the SPAYD descriptor for the user's pending subscription.

    The money goes to the platform account ``settings.BILLING_BANK_ACCOUNT``
    in ``settings.BILLING_CURRENCY``.

    Returns:
        Dict with spayd, amount, currency, variable_symbol, plan and
        recipient

    Raises:
        SubscriptionNotFoundError: If the user has no subscription
        InvalidSubscriptionStateError: If the subscription isn't awaiting payment
        MissingAccountError: If BILLING_BANK_ACCOUNT is not configured
    """
    subscription = get_current_subscription(user=user)
    if subscription is None:
        raise SubscriptionNotFoundError("No subscription found")

    if subscription.status != SubscriptionStatus.PENDING_PAYMENT:
        raise InvalidSubscriptionStateError(
            "Subscription is not awaiting payment",
            current_status=subscription.status
        )

    symbol = subscription.variable_symbol
    amount = subscription.price
    currency = settings.BILLING_CURRENCY

    spayd = build_spayd(
        account=settings.BILLING_BANK_ACCOUNT,
        amount=amount,
        currency=currency,
        message=f'Předplatné {subscription.plan.name} plán',
        variable_symbol=symbol,
    )

    return {
        'spayd': spayd,
        'amount': amount,
        'currency': currency,
        'variable_symbol': symbol,
        'plan': subscription.plan.name,
        'recipient': settings.BILLING_RECIPIENT_NAME,
    }


def render_subscription_qr(*, user) -> bytes:
    """Render the pending subscription payment as a PNG QR code."""
    descriptor = get_subscription_payment_descriptor(user=user)
    return render_qr_png(
        descriptor['spayd'],
        error_correction=getattr(settings, 'PAYMENT_QR_ERROR_CORRECTION', 'M')
    )
