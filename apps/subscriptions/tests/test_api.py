"""
API tests for subscription endpoints.

Tests cover:
- Plan listing
- Current subscription and upgrades
- Payment details and QR
- Admin activation and cancellation
"""

from uuid import uuid4

import pytest
from django.urls import reverse
from rest_framework import status

from apps.subscriptions.models import SubscriptionStatus
from apps.subscriptions.services import upgrade_subscription


@pytest.mark.django_db
class TestPlansAPI:

    def test_list_plans(self, authenticated_client, free_plan, pro_plan, retired_plan):
        response = authenticated_client.get(reverse('subscriptions:plan-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [plan['name'] for plan in response.data] == ['Free', 'Pro']
        assert response.data[1]['price_monthly'] == '199.00'

    def test_requires_auth(self, api_client):
        response = api_client.get(reverse('subscriptions:plan-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestCurrentSubscriptionAPI:

    def test_no_subscription(self, authenticated_client):
        response = authenticated_client.get(reverse('subscriptions:current'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_upgrade_to_paid_plan(self, authenticated_client, pro_plan):
        response = authenticated_client.post(
            reverse('subscriptions:upgrade'),
            {'plan_id': str(pro_plan.id), 'billing_cycle': 'yearly'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == SubscriptionStatus.PENDING_PAYMENT
        assert response.data['price'] == '1990.00'
        assert len(response.data['variable_symbol']) == 6

        response = authenticated_client.get(reverse('subscriptions:current'))
        assert response.data['plan']['name'] == 'Pro'
        assert response.data['status_history'][0]['new_status'] == SubscriptionStatus.PENDING_PAYMENT
        assert response.data['status_history'][0]['variable_symbol'] == response.data['variable_symbol']

    def test_upgrade_to_free_plan(self, authenticated_client, free_plan):
        response = authenticated_client.post(
            reverse('subscriptions:upgrade'), {'plan_id': str(free_plan.id)}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == SubscriptionStatus.ACTIVE
        assert response.data['variable_symbol'] is None

    def test_upgrade_unknown_plan(self, authenticated_client):
        response = authenticated_client.post(
            reverse('subscriptions:upgrade'), {'plan_id': str(uuid4())}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_upgrade_invalid_cycle(self, authenticated_client, pro_plan):
        response = authenticated_client.post(
            reverse('subscriptions:upgrade'),
            {'plan_id': str(pro_plan.id), 'billing_cycle': 'weekly'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestSubscriptionPaymentAPI:

    def test_payment_details(self, authenticated_client, user, pro_plan, billing_account):
        subscription = upgrade_subscription(user=user, plan_id=pro_plan.id)

        response = authenticated_client.get(reverse('subscriptions:current-payment'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount'] == '199.00'
        assert response.data['variable_symbol'] == subscription.variable_symbol
        assert response.data['spayd'].startswith('SPD*1.0*ACC:CZ1801000000000123456789*AM:199.00*')

    def test_payment_without_subscription(self, authenticated_client, billing_account):
        response = authenticated_client.get(reverse('subscriptions:current-payment'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_payment_of_active_subscription(self, authenticated_client, user, free_plan, billing_account):
        upgrade_subscription(user=user, plan_id=free_plan.id)

        response = authenticated_client.get(reverse('subscriptions:current-payment'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['current_status'] == SubscriptionStatus.ACTIVE

    def test_payment_qr(self, authenticated_client, user, pro_plan, billing_account):
        upgrade_subscription(user=user, plan_id=pro_plan.id)

        response = authenticated_client.get(reverse('subscriptions:current-payment-qr'))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'image/png'
        assert response.content.startswith(b'\x89PNG')


@pytest.mark.django_db
class TestAdminActionsAPI:

    def test_activate(self, admin_client, user, pro_plan):
        subscription = upgrade_subscription(user=user, plan_id=pro_plan.id)

        response = admin_client.post(
            reverse('subscriptions:activate', kwargs={'pk': subscription.id}),
            {'reason': 'Bank statement 03/2024'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == SubscriptionStatus.ACTIVE

    def test_activate_requires_admin(self, authenticated_client, user, pro_plan):
        subscription = upgrade_subscription(user=user, plan_id=pro_plan.id)

        response = authenticated_client.post(
            reverse('subscriptions:activate', kwargs={'pk': subscription.id})
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        subscription.refresh_from_db()
        assert subscription.status == SubscriptionStatus.PENDING_PAYMENT

    def test_activate_unknown(self, admin_client):
        response = admin_client.post(reverse('subscriptions:activate', kwargs={'pk': uuid4()}))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_cancel(self, admin_client, user, pro_plan):
        subscription = upgrade_subscription(user=user, plan_id=pro_plan.id)

        response = admin_client.post(reverse('subscriptions:cancel', kwargs={'pk': subscription.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == SubscriptionStatus.CANCELED

        response = admin_client.post(reverse('subscriptions:cancel', kwargs={'pk': subscription.id}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['current_status'] == SubscriptionStatus.CANCELED
