from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
import uuid


class UserManager(BaseUserManager):
    """Manager for email-based login."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('email_verified', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Invoice issuer. Logs in with email.

    The billing profile (company, address, bank account) is printed on
    every invoice the user issues, and ``bank_account`` is the recipient
    account of the invoice payment QR codes.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)
    email_verified = models.BooleanField(default=False)

    # Billing profile
    company_name = models.CharField(max_length=255, blank=True)
    company_id = models.CharField(max_length=20, blank=True, help_text="IČO")
    vat_id = models.CharField(max_length=20, blank=True, help_text="DIČ")
    address = models.CharField(max_length=255, blank=True)
    bank_account = models.CharField(
        max_length=34,
        blank=True,
        help_text="Czech account ([prefix-]number/bank code) or IBAN"
    )

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    # GDPR compliance
    gdpr_deleted_at = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email']),
            models.Index(fields=['created_at']),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return company name, display name or email prefix."""
        return self.company_name or self.display_name or self.email.split('@')[0]

    def anonymize(self):
        """GDPR anonymization. Issued invoices stay, personal data goes."""
        self.email = f"deleted_{self.id}@anonymized.local"
        self.display_name = "Deleted User"
        self.company_name = ''
        self.company_id = ''
        self.vat_id = ''
        self.address = ''
        self.bank_account = ''
        self.is_active = False
        self.gdpr_deleted_at = timezone.now()
        self.set_unusable_password()
        self.save()
