from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
import uuid


class BillingCycle(models.TextChoices):
    MONTHLY = 'monthly', 'Monthly'
    YEARLY = 'yearly', 'Yearly'


class SubscriptionStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    PENDING_PAYMENT = 'pending_payment', 'Pending payment'
    CANCELED = 'canceled', 'Canceled'


class SubscriptionPlan(models.Model):
    """Pricing plan. ``invoice_limit`` is per calendar month; null means unlimited."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    price_monthly = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    price_yearly = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    invoice_limit = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'subscription_plans'
        ordering = ['price_monthly']

    def __str__(self):
        return self.name

    def price_for(self, billing_cycle):
        if billing_cycle == BillingCycle.YEARLY:
            return self.price_yearly
        return self.price_monthly

    def is_free_for(self, billing_cycle):
        return self.price_for(billing_cycle) <= 0


class UserSubscription(models.Model):
    """
    A user's subscription to a plan. At most one per user; upgrades
    update it in place.

    Paid plans start in ``pending_payment`` with a variable symbol the user
    pays by bank transfer; an admin activates the subscription once the
    money arrives. Every paid billing period gets a fresh symbol. Symbols
    of earlier periods stay reserved and are kept on the history rows, so
    a late transfer can still be traced to its period.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='subscription'
    )
    plan = models.ForeignKey(
        SubscriptionPlan,
        on_delete=models.PROTECT,
        related_name='subscriptions'
    )
    payment_symbol = models.OneToOneField(
        'payments.PaymentSymbol',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='subscription'
    )

    status = models.CharField(
        max_length=20,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.PENDING_PAYMENT
    )
    billing_cycle = models.CharField(
        max_length=10,
        choices=BillingCycle.choices,
        default=BillingCycle.MONTHLY
    )
    current_period_start = models.DateTimeField()
    current_period_end = models.DateTimeField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_subscriptions'
        indexes = [
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"{self.user} - {self.plan} ({self.status})"

    @property
    def price(self):
        return self.plan.price_for(self.billing_cycle)

    @property
    def variable_symbol(self):
        return self.payment_symbol.value if self.payment_symbol else None


class SubscriptionStatusHistory(models.Model):
    """Audit record of subscription status changes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    subscription = models.ForeignKey(
        UserSubscription,
        on_delete=models.CASCADE,
        related_name='status_history'
    )
    old_status = models.CharField(max_length=20, choices=SubscriptionStatus.choices, blank=True)
    new_status = models.CharField(max_length=20, choices=SubscriptionStatus.choices)
    reason = models.CharField(max_length=255, blank=True)
    payment_symbol = models.ForeignKey(
        'payments.PaymentSymbol',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="Variable symbol of the billing period this change belongs to"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'subscription_status_history'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.old_status or '-'} -> {self.new_status}"
