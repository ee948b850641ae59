from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid


class InvoiceStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    SENT = 'sent', 'Sent'
    PAID = 'paid', 'Paid'
    CANCELED = 'canceled', 'Canceled'


class Invoice(models.Model):
    """
    Invoice issued by a user to one of their clients.

    Status only changes through the lifecycle services; content is
    editable while the invoice is a draft. Invoices are never deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='invoices'
    )
    client = models.ForeignKey(
        'clients.Client',
        on_delete=models.PROTECT,
        related_name='invoices'
    )
    payment_symbol = models.OneToOneField(
        'payments.PaymentSymbol',
        on_delete=models.PROTECT,
        related_name='invoice'
    )

    issue_date = models.DateField()
    due_date = models.DateField(null=True, blank=True)
    currency = models.CharField(max_length=3)
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    note = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.DRAFT
    )
    is_paid = models.BooleanField(default=False)
    is_canceled = models.BooleanField(default=False)
    payment_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'invoices'
        indexes = [
            models.Index(fields=['user', '-issue_date']),
            models.Index(fields=['user', 'status']),
            models.Index(fields=['due_date']),
        ]
        ordering = ['-issue_date', '-created_at']

    def __str__(self):
        return f"Invoice {self.variable_symbol} ({self.status})"

    @property
    def variable_symbol(self):
        return self.payment_symbol.value

    @property
    def is_overdue(self):
        """Unpaid, not canceled and past its due date."""
        if self.due_date is None:
            return False
        return (
            self.status in (InvoiceStatus.DRAFT, InvoiceStatus.SENT)
            and self.due_date < timezone.localdate()
        )


class InvoiceItem(models.Model):
    """Line item of an invoice. Replaced wholesale when a draft is edited."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='items'
    )
    order_number = models.PositiveIntegerField()
    description = models.CharField(max_length=500)
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    unit = models.CharField(max_length=20, blank=True)
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    class Meta:
        db_table = 'invoice_items'
        ordering = ['order_number']
        constraints = [
            models.UniqueConstraint(
                fields=['invoice', 'order_number'],
                name='unique_item_order_per_invoice'
            ),
        ]

    def __str__(self):
        return f"{self.order_number}. {self.description}"

    @property
    def total_price(self):
        return (self.quantity * self.unit_price).quantize(Decimal('0.01'))
