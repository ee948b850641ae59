from django.contrib import admin

from .models import Invoice, InvoiceItem


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    readonly_fields = ['order_number', 'description', 'quantity', 'unit', 'unit_price']
    can_delete = False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """
    Read-only view of invoices.

    Status and content change only through the API so the lifecycle rules
    and the audit log apply.
    """

    list_display = [
        'variable_symbol',
        'user',
        'client',
        'issue_date',
        'due_date',
        'total_amount',
        'currency',
        'status',
    ]
    list_filter = ['status', 'currency', 'issue_date']
    search_fields = ['payment_symbol__value', 'user__email', 'client__name']
    date_hierarchy = 'issue_date'
    inlines = [InvoiceItemInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'client', 'payment_symbol')
