from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'invoices'

router = DefaultRouter()
router.register(r'', views.InvoiceViewSet, basename='invoice')

urlpatterns = [
    # GET    /api/invoices/                    - List (?status=&client=&date_from=&date_to=&overdue=)
    # POST   /api/invoices/                    - Create draft
    # GET    /api/invoices/statistics/         - Counts and amounts
    # GET    /api/invoices/{id}/               - Detail
    # PUT    /api/invoices/{id}/               - Replace draft content
    # PATCH  /api/invoices/{id}/               - Edit draft
    # POST   /api/invoices/{id}/send/          - Draft -> sent
    # POST   /api/invoices/{id}/mark_paid/     - Sent -> paid
    # POST   /api/invoices/{id}/mark_unpaid/   - Paid -> sent
    # POST   /api/invoices/{id}/cancel/        - Cancel
    # POST   /api/invoices/{id}/duplicate/     - Copy as new draft
    # GET    /api/invoices/{id}/payment/       - SPAYD descriptor
    # GET    /api/invoices/{id}/qr/            - QR code PNG
    path('', include(router.urls)),
]
