import datetime
from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.clients.models import Client
from apps.invoices.services import create_invoice


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Invoice issuer with a bank account in the profile."""
    return User.objects.create_user(
        email='issuer@example.com',
        password='TestPass123!',
        display_name='Issuer',
        company_name='Novak s.r.o.',
        bank_account='19-2000145399/0800',
        email_verified=True,
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Issuer',
        email_verified=True,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_user):
    """API client authenticated as a different user."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def customer(user):
    """Client of the issuer."""
    return Client.objects.create(
        user=user,
        name='ACME a.s.',
        company_id='27074358',
        email='billing@acme.example',
        city='Brno',
    )


@pytest.fixture
def other_customer(other_user):
    return Client.objects.create(user=other_user, name='Foreign Client')


@pytest.fixture
def invoice_items():
    """Two line items totalling 1234.50."""
    return [
        {'description': 'Consulting', 'quantity': Decimal('2'), 'unit': 'h', 'unit_price': Decimal('500.00')},
        {'description': 'Travel', 'quantity': Decimal('1'), 'unit': '', 'unit_price': Decimal('234.50')},
    ]


@pytest.fixture
def unlimited_invoices(settings):
    settings.FREE_INVOICE_LIMIT = None


@pytest.fixture
def make_invoice(user, customer, invoice_items, unlimited_invoices):
    """Factory creating draft invoices through the service layer."""
    def _make(**overrides):
        params = {
            'user': user,
            'client_id': customer.id,
            'issue_date': datetime.date(2024, 3, 1),
            'currency': 'CZK',
            'items': invoice_items,
            'due_days': 14,
        }
        params.update(overrides)
        return create_invoice(**params)
    return _make


@pytest.fixture
def draft_invoice(make_invoice):
    return make_invoice()
