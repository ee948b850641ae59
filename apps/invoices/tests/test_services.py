"""
Service layer tests for invoice management.

Tests cover:
- Creation with items, totals and variable symbols
- Draft-only editing
- Duplication
- Filtering and statistics
- Monthly invoice limits
- Payment descriptors
"""

import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest

from apps.invoices.models import Invoice, InvoiceStatus
from apps.invoices.services import (
    create_invoice,
    update_invoice,
    duplicate_invoice,
    get_invoice,
    get_user_invoices,
    get_invoice_statistics,
    send_invoice,
    mark_invoice_paid,
    cancel_invoice,
    get_invoice_payment_descriptor,
    render_invoice_qr,
)
from apps.invoices.services.exceptions import (
    InvoiceNotFoundError,
    ClientNotFoundError,
    EmptyInvoiceError,
    InvalidStateForEditError,
    InvoiceLimitReachedError,
)
from apps.payments.exceptions import MissingAccountError, SymbolSpaceExhaustedError
from apps.payments.models import PaymentSymbol, SymbolPurpose
from apps.payments.services import validate_variable_symbol


# =============================================================================
# Create Invoice Tests
# =============================================================================

@pytest.mark.django_db
class TestCreateInvoice:

    def test_create_draft(self, make_invoice):
        invoice = make_invoice()

        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.is_paid is False
        assert invoice.is_canceled is False
        assert invoice.total_amount == Decimal('1234.50')
        assert invoice.due_date == datetime.date(2024, 3, 15)
        assert invoice.items.count() == 2

    def test_items_numbered_in_order(self, make_invoice):
        invoice = make_invoice()

        items = list(invoice.items.all())
        assert [item.order_number for item in items] == [1, 2]
        assert items[0].description == 'Consulting'

    def test_symbol_reserved_for_invoice(self, make_invoice):
        invoice = make_invoice()

        assert validate_variable_symbol(invoice.variable_symbol)
        assert invoice.payment_symbol.purpose == SymbolPurpose.INVOICE

    def test_each_invoice_gets_own_symbol(self, make_invoice):
        symbols = {make_invoice().variable_symbol for _ in range(5)}

        assert len(symbols) == 5

    def test_currency_uppercased(self, make_invoice):
        assert make_invoice(currency='eur').currency == 'EUR'

    def test_no_due_days_no_due_date(self, make_invoice):
        assert make_invoice(due_days=None).due_date is None

    def test_empty_items_rejected(self, make_invoice):
        with pytest.raises(EmptyInvoiceError):
            make_invoice(items=[])

        assert Invoice.objects.count() == 0
        assert PaymentSymbol.objects.count() == 0

    def test_other_users_client_rejected(self, make_invoice, other_customer):
        with pytest.raises(ClientNotFoundError):
            make_invoice(client_id=other_customer.id)

    def test_symbol_exhaustion_rolls_back(self, make_invoice):
        with patch('apps.payments.services.variable_symbol.symbol_in_use', return_value=True):
            with pytest.raises(SymbolSpaceExhaustedError):
                make_invoice()

        assert Invoice.objects.count() == 0

    def test_fractional_quantities(self, make_invoice):
        invoice = make_invoice(items=[
            {'description': 'Cement', 'quantity': Decimal('1.5'), 'unit': 't', 'unit_price': Decimal('200.10')},
        ])

        assert invoice.total_amount == Decimal('300.15')


# =============================================================================
# Invoice Limit Tests
# =============================================================================

@pytest.mark.django_db
class TestInvoiceLimit:

    def test_free_limit_enforced(self, make_invoice, settings):
        settings.FREE_INVOICE_LIMIT = 2
        make_invoice()
        make_invoice()

        with pytest.raises(InvoiceLimitReachedError) as exc:
            make_invoice()

        assert exc.value.limit == 2
        assert Invoice.objects.count() == 2

    def test_canceled_invoices_count(self, make_invoice, user, settings):
        settings.FREE_INVOICE_LIMIT = 1
        invoice = make_invoice()
        cancel_invoice(invoice_id=invoice.id, user=user)

        with pytest.raises(InvoiceLimitReachedError):
            make_invoice()

    def test_duplicate_respects_limit(self, draft_invoice, user, settings):
        settings.FREE_INVOICE_LIMIT = 1

        with pytest.raises(InvoiceLimitReachedError):
            duplicate_invoice(invoice_id=draft_invoice.id, user=user)


# =============================================================================
# Update Invoice Tests
# =============================================================================

@pytest.mark.django_db
class TestUpdateInvoice:

    def test_replace_items(self, draft_invoice, user):
        invoice = update_invoice(
            invoice_id=draft_invoice.id,
            user=user,
            items=[{'description': 'Audit', 'quantity': 3, 'unit_price': '100.00'}]
        )

        assert invoice.total_amount == Decimal('300.00')
        assert [item.description for item in invoice.items.all()] == ['Audit']

    def test_issue_date_change_keeps_term(self, draft_invoice, user):
        invoice = update_invoice(
            invoice_id=draft_invoice.id,
            user=user,
            issue_date=datetime.date(2024, 4, 1)
        )

        assert invoice.due_date == datetime.date(2024, 4, 15)

    def test_due_days_recomputes_due_date(self, draft_invoice, user):
        invoice = update_invoice(invoice_id=draft_invoice.id, user=user, due_days=30)

        assert invoice.due_date == datetime.date(2024, 3, 31)

    def test_partial_update_keeps_items(self, draft_invoice, user):
        invoice = update_invoice(invoice_id=draft_invoice.id, user=user, note='Thanks')

        assert invoice.note == 'Thanks'
        assert invoice.items.count() == 2
        assert invoice.total_amount == Decimal('1234.50')

    def test_symbol_unchanged(self, draft_invoice, user):
        symbol = draft_invoice.variable_symbol

        invoice = update_invoice(invoice_id=draft_invoice.id, user=user, currency='EUR')

        assert invoice.variable_symbol == symbol

    @pytest.mark.parametrize('advance', [
        [send_invoice],
        [send_invoice, mark_invoice_paid],
        [cancel_invoice],
    ])
    def test_only_drafts_editable(self, draft_invoice, user, advance):
        for operation in advance:
            operation(invoice_id=draft_invoice.id, user=user)
        draft_invoice.refresh_from_db()

        with pytest.raises(InvalidStateForEditError) as exc:
            update_invoice(invoice_id=draft_invoice.id, user=user, note='Too late')

        assert exc.value.current_status == draft_invoice.status
        draft_invoice.refresh_from_db()
        assert draft_invoice.note == ''

    def test_empty_items_rejected(self, draft_invoice, user):
        with pytest.raises(EmptyInvoiceError):
            update_invoice(invoice_id=draft_invoice.id, user=user, items=[])

        assert draft_invoice.items.count() == 2

    def test_other_user_cannot_edit(self, draft_invoice, other_user):
        with pytest.raises(InvoiceNotFoundError):
            update_invoice(invoice_id=draft_invoice.id, user=other_user, note='Hacked')


# =============================================================================
# Duplicate Invoice Tests
# =============================================================================

@pytest.mark.django_db
class TestDuplicateInvoice:

    def test_duplicate_paid_invoice(self, draft_invoice, user):
        send_invoice(invoice_id=draft_invoice.id, user=user)
        mark_invoice_paid(invoice_id=draft_invoice.id, user=user)

        copy = duplicate_invoice(invoice_id=draft_invoice.id, user=user)

        assert copy.id != draft_invoice.id
        assert copy.status == InvoiceStatus.DRAFT
        assert copy.is_paid is False
        assert copy.payment_date is None
        assert copy.variable_symbol != draft_invoice.variable_symbol
        assert copy.total_amount == draft_invoice.total_amount
        assert copy.items.count() == 2

    def test_duplicate_issued_today_with_same_term(self, draft_invoice, user):
        with patch('apps.invoices.services.invoice_management.timezone.localdate',
                   return_value=datetime.date(2024, 6, 10)):
            copy = duplicate_invoice(invoice_id=draft_invoice.id, user=user)

        assert copy.issue_date == datetime.date(2024, 6, 10)
        assert copy.due_date == datetime.date(2024, 6, 24)

    def test_duplicate_other_users_invoice(self, draft_invoice, other_user):
        with pytest.raises(InvoiceNotFoundError):
            duplicate_invoice(invoice_id=draft_invoice.id, user=other_user)


# =============================================================================
# Query Tests
# =============================================================================

@pytest.mark.django_db
class TestInvoiceQueries:

    def test_get_invoice_scoped_to_owner(self, draft_invoice, user, other_user):
        assert get_invoice(invoice_id=draft_invoice.id, user=user) == draft_invoice

        with pytest.raises(InvoiceNotFoundError):
            get_invoice(invoice_id=draft_invoice.id, user=other_user)

    def test_filter_by_status(self, make_invoice, user):
        sent = make_invoice()
        make_invoice()
        send_invoice(invoice_id=sent.id, user=user)

        result = get_user_invoices(user=user, status=InvoiceStatus.SENT)

        assert list(result) == [sent]

    def test_filter_by_date_range(self, make_invoice, user):
        make_invoice(issue_date=datetime.date(2024, 1, 10))
        february = make_invoice(issue_date=datetime.date(2024, 2, 10))
        make_invoice(issue_date=datetime.date(2024, 3, 10))

        result = get_user_invoices(
            user=user,
            date_from=datetime.date(2024, 2, 1),
            date_to=datetime.date(2024, 2, 29)
        )

        assert list(result) == [february]

    def test_filter_overdue(self, make_invoice, user):
        today = datetime.date.today()
        overdue = make_invoice(issue_date=today - datetime.timedelta(days=30), due_days=14)
        make_invoice(issue_date=today, due_days=14)
        paid_late = make_invoice(issue_date=today - datetime.timedelta(days=30), due_days=14)
        send_invoice(invoice_id=paid_late.id, user=user)
        mark_invoice_paid(invoice_id=paid_late.id, user=user)

        with patch('apps.invoices.services.invoice_management.timezone.localdate', return_value=today):
            result = list(get_user_invoices(user=user, overdue=True))

        assert result == [overdue]

    def test_other_users_invoices_not_listed(self, draft_invoice, other_user):
        assert not get_user_invoices(user=other_user).exists()


@pytest.mark.django_db
class TestInvoiceStatistics:

    def test_statistics(self, make_invoice, user):
        paid = make_invoice()
        send_invoice(invoice_id=paid.id, user=user)
        mark_invoice_paid(invoice_id=paid.id, user=user)

        make_invoice(currency='EUR', items=[
            {'description': 'License', 'quantity': 1, 'unit_price': '99.00'},
        ])

        canceled = make_invoice()
        cancel_invoice(invoice_id=canceled.id, user=user)

        stats = get_invoice_statistics(user=user)

        assert stats['total'] == 3
        assert stats['paid'] == 1
        assert stats['unpaid'] == 1
        assert stats['canceled'] == 1
        assert stats['total_revenue'] == {'CZK': Decimal('1234.50')}
        assert stats['unpaid_amount'] == {'EUR': Decimal('99.00')}

    def test_empty_statistics(self, user):
        stats = get_invoice_statistics(user=user)

        assert stats['total'] == 0
        assert stats['total_revenue'] == {}


# =============================================================================
# Payment Descriptor Tests
# =============================================================================

@pytest.mark.django_db
class TestInvoicePaymentDescriptor:

    def test_descriptor(self, draft_invoice, user):
        descriptor = get_invoice_payment_descriptor(invoice_id=draft_invoice.id, user=user)
        symbol = draft_invoice.variable_symbol

        assert descriptor['spayd'] == (
            f'SPD*1.0*ACC:CZ6508000000192000145399*AM:1234.50*CC:CZK'
            f'*MSG:Faktura {symbol}*X-VS:{symbol}'
        )
        assert descriptor['iban'] == 'CZ6508000000192000145399'
        assert descriptor['variable_symbol'] == symbol

    def test_descriptor_regenerated_after_edit(self, draft_invoice, user):
        update_invoice(invoice_id=draft_invoice.id, user=user, currency='EUR')

        descriptor = get_invoice_payment_descriptor(invoice_id=draft_invoice.id, user=user)

        assert '*CC:EUR' in descriptor['spayd']

    def test_missing_bank_account(self, draft_invoice, user):
        user.bank_account = ''
        user.save()

        with pytest.raises(MissingAccountError):
            get_invoice_payment_descriptor(invoice_id=draft_invoice.id, user=user)

    def test_other_user(self, draft_invoice, other_user):
        with pytest.raises(InvoiceNotFoundError):
            get_invoice_payment_descriptor(invoice_id=draft_invoice.id, user=other_user)

    def test_qr_png(self, draft_invoice, user):
        png = render_invoice_qr(invoice_id=draft_invoice.id, user=user)

        assert png.startswith(b'\x89PNG')
