"""Invoice creation, draft editing, duplication and queries."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Iterable
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q, QuerySet, Sum
from django.utils import timezone

from apps.clients.models import Client
from apps.payments.models import SymbolPurpose
from apps.payments.services import reserve_payment_symbol
from apps.subscriptions.services import can_user_create_invoice, get_monthly_invoice_limit

from ..models import Invoice, InvoiceItem, InvoiceStatus
from .exceptions import (
    InvoiceNotFoundError,
    ClientNotFoundError,
    EmptyInvoiceError,
    InvalidStateForEditError,
    InvoiceLimitReachedError,
)
from .lifecycle import lock_invoice

User = get_user_model()
logger = logging.getLogger(__name__)

UNPAID_STATUSES = (InvoiceStatus.DRAFT, InvoiceStatus.SENT)


def _get_client(*, client_id: UUID, user) -> Client:
    try:
        return Client.objects.get(id=client_id, user=user)
    except Client.DoesNotExist:
        raise ClientNotFoundError(f"Client with ID {client_id} not found")


def _ensure_invoice_quota(user) -> None:
    # Serialises invoice creation per user so the monthly count can't be raced
    User.objects.select_for_update().get(pk=user.pk)

    if not can_user_create_invoice(user):
        limit = get_monthly_invoice_limit(user)
        raise InvoiceLimitReachedError(
            f"Monthly limit of {limit} invoices reached. Upgrade your plan to issue more.",
            limit=limit
        )


def _due_date(issue_date: date, due_days: Optional[int]) -> Optional[date]:
    if due_days is None:
        return None
    return issue_date + timedelta(days=due_days)


def _replace_items(invoice: Invoice, items: Iterable[dict]) -> Decimal:
    """Store items in the given order and return the invoice total."""
    invoice.items.all().delete()

    new_items = [
        InvoiceItem(
            invoice=invoice,
            order_number=position,
            description=item['description'],
            quantity=Decimal(str(item['quantity'])),
            unit=item.get('unit', ''),
            unit_price=Decimal(str(item['unit_price'])),
        )
        for position, item in enumerate(items, start=1)
    ]
    if not new_items:
        raise EmptyInvoiceError("Invoice must have at least one item")

    InvoiceItem.objects.bulk_create(new_items)
    return sum((item.total_price for item in new_items), Decimal('0.00'))


@transaction.atomic
def create_invoice(
    *,
    user,
    client_id: UUID,
    issue_date: date,
    currency: str,
    items: list,
    due_days: Optional[int] = None,
    note: str = ''
) -> Invoice:
    """
    Create a draft invoice with its line items and a fresh variable symbol.

    Args:
        user: Issuer of the invoice
        client_id: Client the invoice is addressed to (must be the user's)
        issue_date: Date of issue
        currency: Three-letter currency code
        items: Line items as dicts with description, quantity, unit_price
            and optional unit
        due_days: Payment term in days; no due date when None
        note: Free text printed on the invoice

    Returns:
        Created draft Invoice

    Raises:
        EmptyInvoiceError: If items is empty
        ClientNotFoundError: If client doesn't exist or isn't the user's
        InvoiceLimitReachedError: If the plan's monthly limit is used up
        SymbolSpaceExhaustedError: If no variable symbol could be allocated
        UniquenessViolationError: If symbol inserts kept colliding
    """
    if not items:
        raise EmptyInvoiceError("Invoice must have at least one item")

    client = _get_client(client_id=client_id, user=user)
    _ensure_invoice_quota(user)

    symbol = reserve_payment_symbol(purpose=SymbolPurpose.INVOICE)

    invoice = Invoice.objects.create(
        user=user,
        client=client,
        payment_symbol=symbol,
        issue_date=issue_date,
        due_date=_due_date(issue_date, due_days),
        currency=currency.upper(),
        note=note,
        status=InvoiceStatus.DRAFT,
    )
    invoice.total_amount = _replace_items(invoice, items)
    invoice.save(update_fields=['total_amount'])

    logger.info(
        "Invoice %s created by user %s (VS %s, %s %s)",
        invoice.id, user.id, symbol.value, invoice.total_amount, invoice.currency
    )
    return invoice


@transaction.atomic
def update_invoice(
    *,
    invoice_id: UUID,
    user,
    client_id: Optional[UUID] = None,
    issue_date: Optional[date] = None,
    currency: Optional[str] = None,
    items: Optional[list] = None,
    due_days: Optional[int] = None,
    note: Optional[str] = None
) -> Invoice:
    """
    Edit a draft invoice.

    Only the given fields change. Items, when given, replace all existing
    items and the total is recomputed. Changing the issue date without
    ``due_days`` keeps the current payment term length.

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or isn't the user's
        InvalidStateForEditError: If invoice is not a draft
        ClientNotFoundError: If the new client isn't the user's
        EmptyInvoiceError: If items is an empty list
    """
    invoice = lock_invoice(invoice_id=invoice_id, user=user)

    if invoice.status != InvoiceStatus.DRAFT:
        raise InvalidStateForEditError(
            f"Only draft invoices can be edited (invoice is '{invoice.status}')",
            current_status=invoice.status
        )

    if client_id is not None:
        invoice.client = _get_client(client_id=client_id, user=user)

    if currency is not None:
        invoice.currency = currency.upper()

    if note is not None:
        invoice.note = note

    if issue_date is not None or due_days is not None:
        if due_days is None and invoice.due_date is not None:
            due_days = (invoice.due_date - invoice.issue_date).days
        if issue_date is not None:
            invoice.issue_date = issue_date
        invoice.due_date = _due_date(invoice.issue_date, due_days)

    if items is not None:
        invoice.total_amount = _replace_items(invoice, items)

    invoice.save()

    logger.info("Invoice %s updated by user %s", invoice.id, user.id)
    return invoice


@transaction.atomic
def duplicate_invoice(*, invoice_id: UUID, user) -> Invoice:
    """
    Copy an invoice into a new draft issued today.

    The copy gets the same client, currency, note, items and payment term,
    and its own variable symbol. The source may be in any status.

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or isn't the user's
        InvoiceLimitReachedError: If the plan's monthly limit is used up
    """
    source = get_invoice(invoice_id=invoice_id, user=user)

    due_days = None
    if source.due_date is not None:
        due_days = (source.due_date - source.issue_date).days

    items = [
        {
            'description': item.description,
            'quantity': item.quantity,
            'unit': item.unit,
            'unit_price': item.unit_price,
        }
        for item in source.items.all()
    ]

    copy = create_invoice(
        user=user,
        client_id=source.client_id,
        issue_date=timezone.localdate(),
        currency=source.currency,
        items=items,
        due_days=due_days,
        note=source.note
    )

    logger.info("Invoice %s duplicated from %s", copy.id, source.id)
    return copy


def get_invoice(*, invoice_id: UUID, user) -> Invoice:
    """
    Get one of the user's invoices with client, symbol and items loaded.

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or isn't the user's
    """
    try:
        return (
            Invoice.objects
            .select_related('client', 'payment_symbol', 'user')
            .prefetch_related('items')
            .get(id=invoice_id, user=user)
        )
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice with ID {invoice_id} not found")


def get_user_invoices(
    *,
    user,
    status: Optional[str] = None,
    client_id: Optional[UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    overdue: bool = False
) -> QuerySet:
    """
    List the user's invoices, newest first.

    Args:
        user: Owner of the invoices
        status: Only invoices in this status
        client_id: Only invoices for this client
        date_from: Issue date on or after
        date_to: Issue date on or before
        overdue: Only unpaid invoices past their due date

    Returns:
        QuerySet of Invoice objects
    """
    queryset = (
        Invoice.objects
        .filter(user=user)
        .select_related('client', 'payment_symbol')
    )

    if status:
        queryset = queryset.filter(status=status)
    if client_id:
        queryset = queryset.filter(client_id=client_id)
    if date_from:
        queryset = queryset.filter(issue_date__gte=date_from)
    if date_to:
        queryset = queryset.filter(issue_date__lte=date_to)
    if overdue:
        queryset = queryset.filter(
            status__in=UNPAID_STATUSES,
            due_date__lt=timezone.localdate()
        )

    return queryset


def _sum_by_currency(queryset) -> dict:
    rows = (
        queryset
        .order_by()
        .values('currency')
        .annotate(amount=Sum('total_amount'))
        .order_by('currency')
    )
    return {row['currency']: row['amount'] for row in rows}


def get_invoice_statistics(*, user) -> dict:
    """
    Count the user's invoices by status and sum amounts per currency.

    Returns:
        Dict with total, paid, unpaid, canceled and overdue counts, and
        total_revenue (paid) and unpaid_amount as {currency: Decimal}
    """
    invoices = Invoice.objects.filter(user=user)
    today = timezone.localdate()

    counts = invoices.aggregate(
        total=Count('id'),
        paid=Count('id', filter=Q(status=InvoiceStatus.PAID)),
        unpaid=Count('id', filter=Q(status__in=UNPAID_STATUSES)),
        canceled=Count('id', filter=Q(status=InvoiceStatus.CANCELED)),
        overdue=Count('id', filter=Q(status__in=UNPAID_STATUSES, due_date__lt=today)),
    )

    return {
        **counts,
        'total_revenue': _sum_by_currency(invoices.filter(status=InvoiceStatus.PAID)),
        'unpaid_amount': _sum_by_currency(invoices.filter(status__in=UNPAID_STATUSES)),
    }
