"""Errors raised by the accounts services. Views map them to HTTP codes."""


class AccountsServiceError(Exception):
    """Base class; anything else escaping a service is a bug."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Email already taken."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    pass


class InactiveAccountError(AccountsServiceError):
    """Login attempt on a deactivated or anonymized account."""
    pass


class UserNotFoundError(AccountsServiceError):
    pass


class PasswordConfirmationError(AccountsServiceError):
    """Password re-entry for a destructive action did not match."""
    pass


class InvalidBankAccountError(AccountsServiceError):
    """Profile bank account is neither a Czech local account nor a CZ IBAN."""
    pass
