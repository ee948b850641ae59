"""
SPAYD (Short Payment Descriptor) encoding.

SPAYD is the Czech standard for encoding a bank transfer into a QR code.
When scanned by a Czech banking app, the QR code pre-fills all payment
details.

Format::

    SPD*1.0*ACC:<IBAN>[*AM:<amount>]*CC:<currency>[*MSG:<message>][*X-VS:<symbol>]

Fields:
    - SPD*1.0: Protocol and version
    - ACC: Bank account in IBAN format
    - AM: Amount with two decimals and a dot separator (optional)
    - CC: Currency code
    - MSG: Message for the recipient, max 60 characters (optional)
    - X-VS: Variable symbol for payment matching, max 10 digits (optional)

Example:
    Descriptor for an invoice::

        from apps.payments.services import build_spayd

        spd = build_spayd(
            account='19-2000145399/0800',
            amount=Decimal('1234.50'),
            currency='CZK',
            message='Faktura 482913',
            variable_symbol='482913',
        )
        # "SPD*1.0*ACC:CZ6508000000192000145399*AM:1234.50*CC:CZK*MSG:Faktura 482913*X-VS:482913"

See Also:
    https://qr-platba.cz/pro-vyvojare/specifikace-formatu/
"""

import re
from typing import Optional
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from ..exceptions import MissingAccountError, InvalidCurrencyError
from .account_identifier import normalize_account

SPAYD_HEADER = 'SPD*1.0'
FIELD_DELIMITER = '*'
MAX_MESSAGE_LENGTH = 60
MAX_SYMBOL_LENGTH = 10

CURRENCY_RE = re.compile(r'^[A-Z]{3}$')


def format_amount(amount) -> Optional[str]:
    """
    Format an amount for the AM field.

    Returns:
        Amount with exactly two decimals, or None if the amount is missing,
        not a number, not positive or too large to quantize
    """
    if amount is None or amount == '':
        return None

    try:
        value = Decimal(str(amount))
        if not value.is_finite() or value <= 0:
            return None
        # Raises when the value has more digits than the context precision
        return str(value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return None


def sanitize_message(message) -> str:
    """Cut the message to 60 characters and blank out delimiters and line breaks."""
    if not message:
        return ''

    text = str(message)[:MAX_MESSAGE_LENGTH]
    return re.sub(r'\r\n|[*\r\n]', ' ', text).strip()


def sanitize_symbol(symbol) -> str:
    """Keep only digits, at most 10 of them."""
    if not symbol:
        return ''

    return re.sub(r'[^0-9]', '', str(symbol))[:MAX_SYMBOL_LENGTH]


def build_spayd(
    *,
    account: str,
    currency: str,
    amount=None,
    message: Optional[str] = None,
    variable_symbol: Optional[str] = None,
) -> str:
    """
    Build a SPAYD payment string for QR code encoding.

    The result depends only on the arguments, so the same input always
    gives a byte-identical string. Optional fields that are missing or
    sanitize to nothing are left out; the order of the remaining fields
    never changes.

    Args:
        account: Recipient account, IBAN or local ``[prefix-]account/bankCode``
        currency: Three-letter currency code (e.g. 'CZK', 'EUR')
        amount: Payment amount; omitted when missing or not positive
        message: Message for the recipient; truncated to 60 characters
        variable_symbol: Payment reference; non-digits are stripped

    Returns:
        SPAYD formatted string

    Raises:
        MissingAccountError: If account is empty
        InvalidAccountFormatError: If account cannot be converted to IBAN
        InvalidCurrencyError: If currency is not a three-letter code
    """
    if not account or not str(account).strip():
        raise MissingAccountError("Bank account is required for a payment descriptor")

    iban = normalize_account(account)

    currency_code = (currency or '').strip().upper()
    if not CURRENCY_RE.match(currency_code):
        raise InvalidCurrencyError(f"Invalid currency code: '{currency}'")

    parts = [SPAYD_HEADER, f'ACC:{iban}']

    formatted_amount = format_amount(amount)
    if formatted_amount:
        parts.append(f'AM:{formatted_amount}')

    parts.append(f'CC:{currency_code}')

    clean_message = sanitize_message(message)
    if clean_message:
        parts.append(f'MSG:{clean_message}')

    clean_symbol = sanitize_symbol(variable_symbol)
    if clean_symbol:
        parts.append(f'X-VS:{clean_symbol}')

    return FIELD_DELIMITER.join(parts)
