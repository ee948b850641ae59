from django.contrib import admin
from .models import PaymentSymbol


@admin.register(PaymentSymbol)
class PaymentSymbolAdmin(admin.ModelAdmin):
    """Read-only view of reserved variable symbols."""

    list_display = ['value', 'purpose', 'created_at']
    list_filter = ['purpose']
    search_fields = ['value']
    readonly_fields = ['value', 'purpose', 'created_at']
    ordering = ['-created_at']

    def has_add_permission(self, request):
        """Symbols are reserved by the allocator only."""
        return False

    def has_change_permission(self, request, obj=None):
        return False
