"""Domain-specific exceptions for invoices services."""


class InvoicesServiceError(Exception):
    """Base exception for invoices services."""
    pass


class InvoiceNotFoundError(InvoicesServiceError):
    """Invoice does not exist or belongs to another user."""
    pass


class ClientNotFoundError(InvoicesServiceError):
    """Client does not exist or belongs to another user."""
    pass


class EmptyInvoiceError(InvoicesServiceError):
    """Invoice has no line items."""
    pass


class InvalidStateForEditError(InvoicesServiceError):
    """Content edit attempted on an invoice that is no longer a draft."""

    def __init__(self, message, *, current_status):
        super().__init__(message)
        self.current_status = current_status


class InvalidStatusTransitionError(InvoicesServiceError):
    """Status change not allowed from the invoice's current status."""

    def __init__(self, message, *, current_status, target_status):
        super().__init__(message)
        self.current_status = current_status
        self.target_status = target_status


class InvoiceLimitReachedError(InvoicesServiceError):
    """Monthly invoice limit of the user's plan is used up."""

    def __init__(self, message, *, limit):
        super().__init__(message)
        self.limit = limit
