"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    PasswordConfirmationError,
    InvalidBankAccountError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .account_management import update_billing_profile, delete_user_account

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'PasswordConfirmationError',
    'InvalidBankAccountError',
    # Services
    'register_user',
    'authenticate_user',
    'update_billing_profile',
    'delete_user_account',
]
