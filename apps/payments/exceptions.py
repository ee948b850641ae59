"""
Domain exceptions for payments app.

These cover bank account normalisation, SPAYD descriptor encoding and
variable symbol allocation. Views catch them and convert them to HTTP
responses; they are never raised as generic faults.
"""


class PaymentsServiceError(Exception):
    """Base exception for payment service errors."""
    pass


class InvalidAccountFormatError(PaymentsServiceError):
    """Bank account is neither an IBAN nor a local Czech account number."""
    pass


class MissingAccountError(PaymentsServiceError):
    """No destination bank account to encode."""
    pass


class InvalidCurrencyError(PaymentsServiceError):
    """Currency is not a three-letter ISO 4217 code."""
    pass


class SymbolSpaceExhaustedError(PaymentsServiceError):
    """No free variable symbol found within the attempt budget."""
    pass


class UniquenessViolationError(PaymentsServiceError):
    """Variable symbol insert kept colliding after all conflict retries."""
    pass
