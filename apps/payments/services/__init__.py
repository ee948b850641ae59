"""
Payments services - Czech bank transfer payments.

This package contains:
- Bank account to IBAN conversion
- SPAYD payment descriptor encoding
- Variable symbol allocation
- QR code rendering
"""

from .account_identifier import (
    normalize_account,
    is_valid_czech_account,
    iban_check_digits,
)
from .spayd import build_spayd
from .variable_symbol import (
    generate_variable_symbol,
    validate_variable_symbol,
    allocate_variable_symbol,
    symbol_in_use,
    reserve_payment_symbol,
    release_payment_symbol,
)
from .qr_code import make_qr_image, render_qr_png

from ..exceptions import (
    PaymentsServiceError,
    InvalidAccountFormatError,
    MissingAccountError,
    InvalidCurrencyError,
    SymbolSpaceExhaustedError,
    UniquenessViolationError,
)

__all__ = [
    # Account numbers
    'normalize_account',
    'is_valid_czech_account',
    'iban_check_digits',
    # Descriptor
    'build_spayd',
    # Variable symbols
    'generate_variable_symbol',
    'validate_variable_symbol',
    'allocate_variable_symbol',
    'symbol_in_use',
    'reserve_payment_symbol',
    'release_payment_symbol',
    # QR
    'make_qr_image',
    'render_qr_png',
    # Exceptions
    'PaymentsServiceError',
    'InvalidAccountFormatError',
    'MissingAccountError',
    'InvalidCurrencyError',
    'SymbolSpaceExhaustedError',
    'UniquenessViolationError',
]
