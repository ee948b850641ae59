"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    company_name: str = ""
) -> User:
    """
    Register a new invoice issuer.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name
        company_name: Optional company name printed on invoices

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already registered
    """
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                display_name=display_name,
                company_name=company_name
            )
    except IntegrityError:
        raise UserRegistrationError(f"Registration failed: {email} is already registered")

    logger.info("User registered: %s", user.id)
    return user
