from django.db import models
from django.conf import settings
import uuid


class Client(models.Model):
    """Customer an invoice is issued to. Each user keeps their own list."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='clients'
    )

    name = models.CharField(max_length=255)
    company_id = models.CharField(max_length=20, blank=True, help_text="IČO")
    vat_id = models.CharField(max_length=20, blank=True, help_text="DIČ")
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=10, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clients'
        indexes = [
            models.Index(fields=['user', 'name']),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name
