from django.db import models
import uuid


class SymbolPurpose(models.TextChoices):
    INVOICE = 'invoice', 'Invoice'
    SUBSCRIPTION = 'subscription', 'Subscription'


class PaymentSymbol(models.Model):
    """
    Variable symbol reserved for one payment-bearing record.

    The unique index on ``value`` decides which of two concurrent
    reservations wins. A row that exists is an active symbol; purging the
    owning record deletes the row and frees the value.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    value = models.CharField(max_length=6, unique=True, editable=False)
    purpose = models.CharField(max_length=20, choices=SymbolPurpose.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payment_symbols'
        indexes = [
            models.Index(fields=['purpose', 'created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"VS {self.value} ({self.purpose})"
