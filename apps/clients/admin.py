from django.contrib import admin

from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'company_id', 'email', 'city', 'user', 'created_at']
    search_fields = ['name', 'company_id', 'vat_id', 'email', 'user__email']
    list_filter = ['created_at']
    raw_id_fields = ['user']
    readonly_fields = ['created_at', 'updated_at']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user')
