"""
Invoices services - business logic for invoices.

This package contains:
- Status lifecycle (send, mark paid/unpaid, cancel)
- Invoice creation, draft editing and duplication
- Listing, filtering and statistics
- QR payment descriptors
"""

from .lifecycle import (
    ALLOWED_TRANSITIONS,
    can_transition,
    send_invoice,
    mark_invoice_paid,
    mark_invoice_unpaid,
    cancel_invoice,
)
from .invoice_management import (
    create_invoice,
    update_invoice,
    duplicate_invoice,
    get_invoice,
    get_user_invoices,
    get_invoice_statistics,
)
from .payment_descriptor import get_invoice_payment_descriptor, render_invoice_qr

from .exceptions import (
    InvoicesServiceError,
    InvoiceNotFoundError,
    ClientNotFoundError,
    EmptyInvoiceError,
    InvalidStateForEditError,
    InvalidStatusTransitionError,
    InvoiceLimitReachedError,
)

__all__ = [
    # Lifecycle
    'ALLOWED_TRANSITIONS',
    'can_transition',
    'send_invoice',
    'mark_invoice_paid',
    'mark_invoice_unpaid',
    'cancel_invoice',
    # Management
    'create_invoice',
    'update_invoice',
    'duplicate_invoice',
    'get_invoice',
    'get_user_invoices',
    'get_invoice_statistics',
    # Payment
    'get_invoice_payment_descriptor',
    'render_invoice_qr',
    # Exceptions
    'InvoicesServiceError',
    'InvoiceNotFoundError',
    'ClientNotFoundError',
    'EmptyInvoiceError',
    'InvalidStateForEditError',
    'InvalidStatusTransitionError',
    'InvoiceLimitReachedError',
]
