"""
Czech bank account to IBAN conversion.

Czech accounts are written locally as ``[prefix-]account/bankCode``
(e.g. ``19-2000145399/0800``). Banking apps reading SPAYD QR codes expect
the IBAN form::

    CZ <2 check digits> <4-digit bank code> <6-digit prefix> <10-digit account>

Check digits follow ISO 13616 (mod 97), so ``19-2000145399/0800`` becomes
``CZ6508000000192000145399``.
"""

import re

from ..exceptions import InvalidAccountFormatError

COUNTRY_CODE = 'CZ'

# "CZ" expressed as digits for the mod-97 check (C=12, Z=35)
COUNTRY_CODE_DIGITS = '1235'

LOCAL_ACCOUNT_RE = re.compile(r'^(?:(?P<prefix>\d{1,6})-)?(?P<account>\d{1,10})/(?P<bank_code>\d{1,4})$')
STRICT_LOCAL_ACCOUNT_RE = re.compile(r'^(\d{0,6}-)?(\d{1,10})/\d{4}$')
IBAN_RE = re.compile(r'^CZ\d{22}$')


def iban_check_digits(bban: str) -> str:
    """
    Compute the two IBAN check digits for a Czech BBAN.

    Args:
        bban: 20-digit basic bank account number (bank code + prefix + account)

    Returns:
        Check digits as a zero-padded two-character string
    """
    remainder = int(f'{bban}{COUNTRY_CODE_DIGITS}00') % 97
    return f'{98 - remainder:02d}'


def normalize_account(raw: str) -> str:
    """
    Convert a bank account reference to its IBAN form.

    Values that already start with ``CZ`` are returned with whitespace
    removed and are not validated.

    Args:
        raw: IBAN or local ``[prefix-]account/bankCode`` notation

    Returns:
        IBAN string

    Raises:
        InvalidAccountFormatError: If raw is neither an IBAN nor a valid
            local account number
    """
    value = (raw or '').strip()

    if value.startswith(COUNTRY_CODE):
        return re.sub(r'\s', '', value)

    if '/' not in value:
        raise InvalidAccountFormatError(
            f"Bank account '{raw}' must be an IBAN or in the form [prefix-]account/bankCode"
        )

    match = LOCAL_ACCOUNT_RE.match(re.sub(r'\s', '', value))
    if not match:
        raise InvalidAccountFormatError(
            f"Bank account '{raw}' is not a valid Czech account number"
        )

    bank_code = match.group('bank_code').zfill(4)
    prefix = (match.group('prefix') or '').zfill(6)
    account = match.group('account').zfill(10)

    bban = f'{bank_code}{prefix}{account}'
    return f'{COUNTRY_CODE}{iban_check_digits(bban)}{bban}'


def is_valid_czech_account(raw: str) -> bool:
    """
    Strictly validate a Czech bank account.

    IBANs must have 22 digits after the country code and a correct
    checksum. Local numbers need a full 4-digit bank code.
    """
    if not raw:
        return False

    value = raw.strip()
    if value.startswith(COUNTRY_CODE):
        iban = re.sub(r'\s', '', value)
        if not IBAN_RE.match(iban):
            return False
        return iban_check_digits(iban[4:]) == iban[2:4]

    return bool(STRICT_LOCAL_ACCOUNT_RE.match(value))
