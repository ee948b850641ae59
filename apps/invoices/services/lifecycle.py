"""
Invoice status lifecycle.

    draft ──send──> sent ──mark paid──> paid
      │              │  <──mark unpaid──  │
      └──────────────┴──────cancel────────┴──> canceled

Canceled is terminal. Mark unpaid is the only backward move and exists to
correct a payment that was recorded by mistake.

Every transition locks the invoice row and checks the current status
inside the same transaction, so two concurrent requests cannot both act
on a stale status.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from ..models import Invoice, InvoiceStatus
from .exceptions import InvoiceNotFoundError, InvalidStatusTransitionError

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELED}),
    InvoiceStatus.SENT: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELED}),
    InvoiceStatus.PAID: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELED}),
    InvoiceStatus.CANCELED: frozenset(),
}


def can_transition(current_status: str, target_status: str) -> bool:
    """Return True if one step from current_status to target_status is allowed."""
    return target_status in ALLOWED_TRANSITIONS.get(current_status, frozenset())


def lock_invoice(*, invoice_id: UUID, user) -> Invoice:
    """
    Fetch the user's invoice with a row lock.

    Must be called inside a transaction.

    Raises:
        InvoiceNotFoundError: If no such invoice belongs to the user
    """
    try:
        return (
            Invoice.objects
            .select_for_update()
            .get(id=invoice_id, user=user)
        )
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice with ID {invoice_id} not found")


def _apply_transition(*, invoice_id, user, from_statuses, target_status, action, **changes) -> Invoice:
    invoice = lock_invoice(invoice_id=invoice_id, user=user)
    current_status = invoice.status

    if current_status not in from_statuses or not can_transition(current_status, target_status):
        raise InvalidStatusTransitionError(
            f"Cannot {action} invoice in status '{current_status}'",
            current_status=current_status,
            target_status=target_status
        )

    invoice.status = target_status
    for field, value in changes.items():
        setattr(invoice, field, value)
    invoice.save(update_fields=['status', *changes.keys(), 'updated_at'])

    logger.info(
        "Invoice %s %s: %s -> %s (user %s)",
        invoice.id, action, current_status, target_status, user.id
    )
    return invoice


@transaction.atomic
def send_invoice(*, invoice_id: UUID, user) -> Invoice:
    """
    Mark a draft as sent to the client.

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or isn't the user's
        InvalidStatusTransitionError: If invoice is not a draft
    """
    return _apply_transition(
        invoice_id=invoice_id,
        user=user,
        from_statuses={InvoiceStatus.DRAFT},
        target_status=InvoiceStatus.SENT,
        action='send'
    )


@transaction.atomic
def mark_invoice_paid(*, invoice_id: UUID, user) -> Invoice:
    """
    Record payment of a sent invoice.

    The payment date is always today, also when the invoice was paid,
    marked unpaid and is now paid again.

    Args:
        invoice_id: Invoice to mark
        user: Owner of the invoice

    Returns:
        Updated invoice with is_paid and payment_date set

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or isn't the user's
        InvalidStatusTransitionError: If invoice is not sent
    """
    return _apply_transition(
        invoice_id=invoice_id,
        user=user,
        from_statuses={InvoiceStatus.SENT},
        target_status=InvoiceStatus.PAID,
        action='mark paid',
        is_paid=True,
        payment_date=timezone.localdate()
    )


@transaction.atomic
def mark_invoice_unpaid(*, invoice_id: UUID, user) -> Invoice:
    """
    Undo a payment record; the invoice goes back to sent.

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or isn't the user's
        InvalidStatusTransitionError: If invoice is not paid
    """
    return _apply_transition(
        invoice_id=invoice_id,
        user=user,
        from_statuses={InvoiceStatus.PAID},
        target_status=InvoiceStatus.SENT,
        action='mark unpaid',
        is_paid=False,
        payment_date=None
    )


@transaction.atomic
def cancel_invoice(*, invoice_id: UUID, user) -> Invoice:
    """
    Cancel an invoice. There is no way back.

    A canceled invoice keeps its number, its variable symbol and, if it was
    paid, its payment record.

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or isn't the user's
        InvalidStatusTransitionError: If invoice is already canceled
    """
    return _apply_transition(
        invoice_id=invoice_id,
        user=user,
        from_statuses={InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.PAID},
        target_status=InvoiceStatus.CANCELED,
        action='cancel',
        is_canceled=True
    )
