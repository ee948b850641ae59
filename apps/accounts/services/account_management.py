"""Account management service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.payments.models import PaymentSymbol
from apps.payments.services import is_valid_czech_account, release_payment_symbol
from apps.subscriptions.models import UserSubscription, SubscriptionStatus

from .exceptions import PasswordConfirmationError, InvalidBankAccountError, UserNotFoundError

User = get_user_model()
logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('display_name', 'company_name', 'company_id', 'vat_id', 'address', 'bank_account')


@transaction.atomic
def update_billing_profile(*, user_id: UUID, **fields) -> User:
    """
    Update the profile fields printed on invoices.

    Args:
        user_id: User's ID
        **fields: Any of display_name, company_name, company_id, vat_id,
            address, bank_account

    Returns:
        Updated User instance

    Raises:
        UserNotFoundError: If the user does not exist
        InvalidBankAccountError: If bank_account is set and not a valid
            Czech account number or IBAN
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User {user_id} not found")

    updates = {name: value for name, value in fields.items() if name in PROFILE_FIELDS}

    bank_account: Optional[str] = updates.get('bank_account')
    if bank_account:
        bank_account = bank_account.strip()
        if not is_valid_czech_account(bank_account):
            raise InvalidBankAccountError(
                "Invalid bank account. Use prefix-number/bank code or a CZ IBAN."
            )
        updates['bank_account'] = bank_account

    for name, value in updates.items():
        setattr(user, name, value)
    user.save(update_fields=list(updates.keys()))

    return user


@transaction.atomic
def delete_user_account(*, user_id: UUID, password: str) -> None:
    """
    GDPR-compliant account deletion (anonymization).

    Issued invoices are kept for accounting. Subscriptions are canceled and
    their variable symbols released, since nobody will pay them anymore.

    Args:
        user_id: User's ID
        password: User's password for confirmation

    Raises:
        UserNotFoundError: If the user does not exist
        PasswordConfirmationError: If password is incorrect
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User {user_id} not found")

    if not user.check_password(password):
        raise PasswordConfirmationError("Invalid password")

    subscriptions = UserSubscription.objects.select_for_update().filter(user=user)
    for subscription in subscriptions:
        # Current symbol plus those of earlier billing periods
        symbol_ids = set(
            subscription.status_history
            .exclude(payment_symbol=None)
            .values_list('payment_symbol_id', flat=True)
        )
        if subscription.payment_symbol_id is not None:
            symbol_ids.add(subscription.payment_symbol_id)

        subscription.status = SubscriptionStatus.CANCELED
        subscription.payment_symbol = None
        subscription.save(update_fields=['status', 'payment_symbol', 'updated_at'])

        for symbol in PaymentSymbol.objects.filter(id__in=symbol_ids):
            release_payment_symbol(symbol)

    user.anonymize()
    logger.info("User %s anonymized", user_id)
