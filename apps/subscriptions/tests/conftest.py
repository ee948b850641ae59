from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.subscriptions.models import SubscriptionPlan


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def billing_account(settings):
    """Platform account that receives subscription payments."""
    settings.BILLING_BANK_ACCOUNT = '123456789/0100'
    settings.BILLING_CURRENCY = 'CZK'
    settings.BILLING_RECIPIENT_NAME = 'Fakturace'


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='subscriber@example.com',
        password='TestPass123!',
        display_name='Subscriber',
        email_verified=True,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Admin',
        email_verified=True,
        is_staff=True,
    )


@pytest.fixture
def authenticated_client(user):
    return _client_for(user)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def free_plan(db):
    return SubscriptionPlan.objects.create(name='Free', invoice_limit=5)


@pytest.fixture
def pro_plan(db):
    return SubscriptionPlan.objects.create(
        name='Pro',
        description='Unlimited invoices',
        price_monthly=Decimal('199.00'),
        price_yearly=Decimal('1990.00'),
        invoice_limit=None,
    )


@pytest.fixture
def starter_plan(db):
    return SubscriptionPlan.objects.create(
        name='Starter',
        price_monthly=Decimal('99.00'),
        price_yearly=Decimal('990.00'),
        invoice_limit=20,
    )


@pytest.fixture
def retired_plan(db):
    return SubscriptionPlan.objects.create(
        name='Legacy',
        price_monthly=Decimal('49.00'),
        is_active=False,
    )
