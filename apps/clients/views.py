import logging

from django.db.models import ProtectedError, Q
from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter

from .models import Client
from .serializers import ClientSerializer

logger = logging.getLogger(__name__)


class ClientPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


@extend_schema_view(
    list=extend_schema(
        parameters=[OpenApiParameter('search', str, description='Filter by name, IČO or email')]
    )
)
@extend_schema(tags=['clients'])
class ClientViewSet(viewsets.ModelViewSet):
    """
    CRUD for the current user's clients.

    Other users' clients are invisible (404). A client that already has
    invoices cannot be deleted.
    """

    serializer_class = ClientSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ClientPagination

    def get_queryset(self):
        queryset = Client.objects.filter(user=self.request.user)

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(company_id__icontains=search) |
                Q(email__icontains=search)
            )
        return queryset

    def perform_create(self, serializer):
        client = serializer.save(user=self.request.user)
        logger.info("Client %s created by user %s", client.id, self.request.user.id)

    def destroy(self, request, *args, **kwargs):
        client = self.get_object()
        try:
            client.delete()
        except ProtectedError:
            return Response(
                {'error': 'Client has invoices and cannot be deleted'},
                status=status.HTTP_409_CONFLICT
            )
        return Response(status=status.HTTP_204_NO_CONTENT)
