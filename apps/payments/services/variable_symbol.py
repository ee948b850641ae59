"""
Variable symbol allocation.

A variable symbol is the numeric reference a payer types into a bank
transfer so the payee can match the incoming money to an invoice or a
subscription period. Symbols here are 6 digits and never start with 0,
giving 900,000 possible values.

Allocation happens in two steps:

1. ``allocate_variable_symbol`` draws random candidates until the lookup
   reports one as free (bounded by ``max_attempts``).
2. ``reserve_payment_symbol`` inserts the candidate into the
   ``payment_symbols`` table. The unique index on the value decides
   races between concurrent requests; a collision there is retried with a
   fresh candidate.
"""

import logging
import re
import secrets
from typing import Callable, Optional

from django.conf import settings
from django.db import transaction, IntegrityError

from ..exceptions import SymbolSpaceExhaustedError, UniquenessViolationError
from ..models import PaymentSymbol

logger = logging.getLogger(__name__)

SYMBOL_RE = re.compile(r'^[1-9][0-9]{5}$')
DEFAULT_MAX_ATTEMPTS = 100


def generate_variable_symbol(rng=None) -> str:
    """
    Generate a random 6-digit variable symbol.

    Args:
        rng: Random source with ``randint``; defaults to ``secrets.SystemRandom()``

    Returns:
        Symbol whose first digit is 1-9 followed by five digits
    """
    rng = rng or secrets.SystemRandom()
    first_digit = rng.randint(1, 9)
    suffix = rng.randint(0, 99999)
    return f'{first_digit}{suffix:05d}'


def validate_variable_symbol(value) -> bool:
    """Return True if value is exactly 6 digits with no leading zero."""
    return bool(value) and bool(SYMBOL_RE.match(str(value)))


def symbol_in_use(value: str) -> bool:
    """Check whether a symbol is reserved by any invoice or subscription."""
    return PaymentSymbol.objects.filter(value=value).exists()


def allocate_variable_symbol(
    *,
    is_in_use: Callable[[str], bool],
    rng=None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> str:
    """
    Find a variable symbol that is free at check time.

    The check is not a reservation: a concurrent request may pick the same
    value before it is stored. Callers insert under a unique constraint
    (see ``reserve_payment_symbol``).

    Args:
        is_in_use: Lookup returning True if a candidate is already taken
        rng: Random source with ``randint``
        max_attempts: Maximum number of candidates to try

    Returns:
        Free variable symbol

    Raises:
        SymbolSpaceExhaustedError: If no free symbol found in max_attempts
    """
    rng = rng or secrets.SystemRandom()

    for _ in range(max_attempts):
        candidate = generate_variable_symbol(rng)
        if not is_in_use(candidate):
            return candidate

    logger.error("No free variable symbol after %d attempts", max_attempts)
    raise SymbolSpaceExhaustedError(
        f"Unable to generate unique variable symbol after {max_attempts} attempts"
    )


def reserve_payment_symbol(
    *,
    purpose: str,
    rng=None,
    max_attempts: Optional[int] = None,
    conflict_retries: Optional[int] = None
) -> PaymentSymbol:
    """
    Allocate a variable symbol and store it.

    Each insert runs in its own savepoint so a unique-index collision
    rolls back only the failed insert, not the caller's transaction.

    Args:
        purpose: What the symbol pays for (see ``SymbolPurpose``)
        rng: Random source with ``randint``
        max_attempts: Candidate budget per allocation
            (defaults to ``settings.PAYMENT_SYMBOL_MAX_ATTEMPTS``)
        conflict_retries: How many insert collisions to retry
            (defaults to ``settings.PAYMENT_SYMBOL_CONFLICT_RETRIES``)

    Returns:
        Saved PaymentSymbol

    Raises:
        SymbolSpaceExhaustedError: If no free candidate found
        UniquenessViolationError: If inserts collided more than conflict_retries times
    """
    if max_attempts is None:
        max_attempts = getattr(settings, 'PAYMENT_SYMBOL_MAX_ATTEMPTS', DEFAULT_MAX_ATTEMPTS)
    if conflict_retries is None:
        conflict_retries = getattr(settings, 'PAYMENT_SYMBOL_CONFLICT_RETRIES', 1)

    for attempt in range(conflict_retries + 1):
        value = allocate_variable_symbol(
            is_in_use=symbol_in_use,
            rng=rng,
            max_attempts=max_attempts
        )

        try:
            with transaction.atomic():
                symbol = PaymentSymbol.objects.create(value=value, purpose=purpose)
        except IntegrityError:
            logger.warning(
                "Variable symbol %s taken concurrently (attempt %d of %d)",
                value, attempt + 1, conflict_retries + 1
            )
            continue

        logger.info("Reserved variable symbol %s for %s", value, purpose)
        return symbol

    raise UniquenessViolationError(
        f"Variable symbol collided {conflict_retries + 1} times, giving up"
    )


def release_payment_symbol(symbol: PaymentSymbol) -> None:
    """Free a symbol whose owning record is being purged."""
    value = symbol.value
    symbol.delete()
    logger.info("Released variable symbol %s", value)
