import logging

from django.http import HttpResponse
from rest_framework import viewsets, status, serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema

from apps.payments.services import (
    PaymentsServiceError,
    SymbolSpaceExhaustedError,
    UniquenessViolationError,
)

from .serializers import (
    InvoiceSerializer,
    InvoiceListSerializer,
    InvoiceWriteSerializer,
    InvoiceFilterSerializer,
    InvoicePaymentSerializer,
    InvoiceStatisticsSerializer,
)
from .services import (
    create_invoice,
    update_invoice,
    duplicate_invoice,
    get_invoice,
    get_user_invoices,
    get_invoice_statistics,
    send_invoice,
    mark_invoice_paid,
    mark_invoice_unpaid,
    cancel_invoice,
    get_invoice_payment_descriptor,
    render_invoice_qr,
    # Exceptions
    InvoicesServiceError,
    InvoiceNotFoundError,
    ClientNotFoundError,
    InvalidStateForEditError,
    InvalidStatusTransitionError,
    InvoiceLimitReachedError,
)

logger = logging.getLogger(__name__)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    current_status = serializers.CharField(required=False)


def error_response(e):
    """Map an invoices or payments domain error to an HTTP response."""
    if isinstance(e, (InvoiceNotFoundError, ClientNotFoundError)):
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    if isinstance(e, InvalidStatusTransitionError):
        return Response({
            'error': str(e),
            'current_status': e.current_status,
            'target_status': e.target_status,
        }, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(e, InvalidStateForEditError):
        return Response(
            {'error': str(e), 'current_status': e.current_status},
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(e, InvoiceLimitReachedError):
        return Response({
            'error': str(e),
            'error_code': 'INVOICE_LIMIT_REACHED',
            'limit': e.limit,
        }, status=status.HTTP_403_FORBIDDEN)

    if isinstance(e, (SymbolSpaceExhaustedError, UniquenessViolationError)):
        logger.error("Variable symbol allocation failed: %s", e)
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)


class InvoicePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema(tags=['invoices'])
class InvoiceViewSet(viewsets.GenericViewSet):
    """
    Invoices of the current user.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Filterable list of invoices
    create: Create a draft invoice
    retrieve: Invoice detail with items
    update / partial_update: Edit a draft
    send / mark_paid / mark_unpaid / cancel: Status changes
    duplicate: Copy into a new draft
    payment / qr: QR payment data
    statistics: Counts and amounts

    Invoices cannot be deleted.
    """

    serializer_class = InvoiceSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = InvoicePagination
    lookup_value_regex = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'

    def get_queryset(self):
        filter_serializer = InvoiceFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return get_user_invoices(
            user=self.request.user,
            status=params.get('status'),
            client_id=params.get('client'),
            date_from=params.get('date_from'),
            date_to=params.get('date_to'),
            overdue=params.get('overdue', False)
        )

    @extend_schema(
        parameters=[InvoiceFilterSerializer],
        responses={200: InvoiceListSerializer(many=True)},
    )
    def list(self, request):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(InvoiceListSerializer(page, many=True).data)
        return Response(InvoiceListSerializer(queryset, many=True).data)

    @extend_schema(
        request=InvoiceWriteSerializer,
        responses={
            201: InvoiceSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
    )
    def create(self, request):
        serializer = InvoiceWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invoice = create_invoice(user=request.user, **serializer.validated_data)
        except (InvoicesServiceError, PaymentsServiceError) as e:
            return error_response(e)

        invoice = get_invoice(invoice_id=invoice.id, user=request.user)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: InvoiceSerializer, 404: ErrorResponseSerializer})
    def retrieve(self, request, pk=None):
        try:
            invoice = get_invoice(invoice_id=pk, user=request.user)
        except InvoiceNotFoundError as e:
            return error_response(e)
        return Response(InvoiceSerializer(invoice).data)

    def _update(self, request, pk, partial):
        serializer = InvoiceWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            update_invoice(invoice_id=pk, user=request.user, **serializer.validated_data)
        except InvoicesServiceError as e:
            return error_response(e)

        invoice = get_invoice(invoice_id=pk, user=request.user)
        return Response(InvoiceSerializer(invoice).data)

    @extend_schema(
        request=InvoiceWriteSerializer,
        responses={200: InvoiceSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Replace a draft's content. Only drafts can be edited.",
    )
    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    @extend_schema(
        request=InvoiceWriteSerializer,
        responses={200: InvoiceSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Edit some fields of a draft. Items, when given, replace all items.",
    )
    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def _transition(self, request, pk, operation):
        try:
            invoice = operation(invoice_id=pk, user=request.user)
        except InvoicesServiceError as e:
            return error_response(e)

        invoice = get_invoice(invoice_id=invoice.id, user=request.user)
        return Response(InvoiceSerializer(invoice).data)

    @extend_schema(
        request=None,
        responses={200: InvoiceSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Draft -> sent.",
    )
    @action(detail=True, methods=['post'])
    def send(self, request, pk=None):
        return self._transition(request, pk, send_invoice)

    @extend_schema(
        request=None,
        responses={200: InvoiceSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Sent -> paid. Payment date is today.",
    )
    @action(detail=True, methods=['post'])
    def mark_paid(self, request, pk=None):
        return self._transition(request, pk, mark_invoice_paid)

    @extend_schema(
        request=None,
        responses={200: InvoiceSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Paid -> sent. Clears the payment date.",
    )
    @action(detail=True, methods=['post'])
    def mark_unpaid(self, request, pk=None):
        return self._transition(request, pk, mark_invoice_unpaid)

    @extend_schema(
        request=None,
        responses={200: InvoiceSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Cancel the invoice. Canceled invoices cannot change anymore.",
    )
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        return self._transition(request, pk, cancel_invoice)

    @extend_schema(
        request=None,
        responses={
            201: InvoiceSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        description="Copy the invoice into a new draft issued today.",
    )
    @action(detail=True, methods=['post'])
    def duplicate(self, request, pk=None):
        try:
            copy = duplicate_invoice(invoice_id=pk, user=request.user)
        except (InvoicesServiceError, PaymentsServiceError) as e:
            return error_response(e)

        copy = get_invoice(invoice_id=copy.id, user=request.user)
        return Response(InvoiceSerializer(copy).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        responses={200: InvoicePaymentSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="SPAYD payment descriptor for the invoice.",
    )
    @action(detail=True, methods=['get'])
    def payment(self, request, pk=None):
        try:
            descriptor = get_invoice_payment_descriptor(invoice_id=pk, user=request.user)
        except (InvoicesServiceError, PaymentsServiceError) as e:
            return error_response(e)

        return Response(InvoicePaymentSerializer(descriptor).data)

    @extend_schema(
        responses={(200, 'image/png'): OpenApiTypes.BINARY, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="QR code of the payment descriptor as PNG.",
    )
    @action(detail=True, methods=['get'])
    def qr(self, request, pk=None):
        try:
            png = render_invoice_qr(invoice_id=pk, user=request.user)
        except (InvoicesServiceError, PaymentsServiceError) as e:
            return error_response(e)

        return HttpResponse(png, content_type='image/png')

    @extend_schema(responses={200: InvoiceStatisticsSerializer})
    @action(detail=False, methods=['get'])
    def statistics(self, request):
        stats = get_invoice_statistics(user=request.user)
        return Response(InvoiceStatisticsSerializer(stats).data)
