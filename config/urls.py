"""
URL configuration for the invoicing API.

All endpoints live under ``/api/``; the browsable schema is at ``/api/docs/``.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from config.views import health_check

urlpatterns = [
    # Health check
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication and billing profile
    path('api/auth/', include('apps.accounts.urls')),

    # API endpoints
    path('api/clients/', include('apps.clients.urls')),
    path('api/invoices/', include('apps.invoices.urls')),
    path('api/subscriptions/', include('apps.subscriptions.urls')),
]

# Static files (development only)
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
