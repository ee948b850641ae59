"""Domain-specific exceptions for subscriptions services."""


class SubscriptionsServiceError(Exception):
    """Base exception for subscriptions services."""
    pass


class PlanNotFoundError(SubscriptionsServiceError):
    """Raised when a plan does not exist or is not offered anymore."""
    pass


class SubscriptionNotFoundError(SubscriptionsServiceError):
    """Raised when a subscription does not exist."""
    pass


class InvalidSubscriptionStateError(SubscriptionsServiceError):
    """Raised when the subscription's status doesn't allow the operation."""

    def __init__(self, message, *, current_status):
        super().__init__(message)
        self.current_status = current_status
