"""QR payment data for invoices."""

import logging
from uuid import UUID

from django.conf import settings

from apps.payments.services import build_spayd, normalize_account, render_qr_png

from .invoice_management import get_invoice

logger = logging.getLogger(__name__)


def get_invoice_payment_descriptor(*, invoice_id: UUID, user) -> dict:
    """
    Build the SPAYD payment descriptor of an invoice.

    The recipient is the issuer's bank account; the variable symbol lets
    the issuer match the incoming payment to the invoice.

    Returns:
        Dict with spayd, iban, amount, currency and variable_symbol

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or isn't the user's
        MissingAccountError: If the issuer has no bank account in the profile
        InvalidAccountFormatError: If the stored bank account is malformed
    """
    invoice = get_invoice(invoice_id=invoice_id, user=user)
    symbol = invoice.variable_symbol
    account = invoice.user.bank_account

    spayd = build_spayd(
        account=account,
        amount=invoice.total_amount,
        currency=invoice.currency,
        message=f'Faktura {symbol}',
        variable_symbol=symbol,
    )

    return {
        'spayd': spayd,
        'iban': normalize_account(account),
        'amount': invoice.total_amount,
        'currency': invoice.currency,
        'variable_symbol': symbol,
    }


def render_invoice_qr(*, invoice_id: UUID, user) -> bytes:
    """Render the invoice's payment descriptor as a PNG QR code."""
    descriptor = get_invoice_payment_descriptor(invoice_id=invoice_id, user=user)
    try:
        return render_qr_png(
            descriptor['spayd'],
            error_correction=getattr(settings, 'PAYMENT_QR_ERROR_CORRECTION', 'M')
        )
    except ValueError:
        logger.exception("QR rendering failed for invoice %s", invoice_id)
        raise
