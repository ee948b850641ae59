import datetime

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.clients.models import Client


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='issuer@example.com',
        password='TestPass123!',
        display_name='Issuer',
        email_verified=True,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        email_verified=True,
    )


@pytest.fixture
def customer(user):
    return Client.objects.create(
        user=user,
        name='ACME a.s.',
        company_id='27074358',
        vat_id='CZ27074358',
        email='billing@acme.example',
        address='Vídeňská 12',
        city='Brno',
        zip_code='639 00',
    )


@pytest.fixture
def foreign_customer(other_user):
    return Client.objects.create(user=other_user, name='Foreign s.r.o.')


@pytest.fixture
def invoiced_customer(user, customer, settings):
    """Customer with one issued invoice."""
    from apps.invoices.services import create_invoice

    settings.FREE_INVOICE_LIMIT = None
    create_invoice(
        user=user,
        client_id=customer.id,
        issue_date=datetime.date(2024, 3, 1),
        currency='CZK',
        items=[{'description': 'Consulting', 'quantity': 1, 'unit_price': '1000.00'}],
    )
    return customer
