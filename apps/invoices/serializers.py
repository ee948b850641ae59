from decimal import Decimal

from rest_framework import serializers

from .models import Invoice, InvoiceItem, InvoiceStatus


class InvoiceItemSerializer(serializers.ModelSerializer):
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = InvoiceItem
        fields = ['order_number', 'description', 'quantity', 'unit', 'unit_price', 'total_price']
        read_only_fields = fields


class InvoiceItemInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=500)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=3, min_value=Decimal('0.001'))
    unit = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))


class ClientSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)


class InvoiceSerializer(serializers.ModelSerializer):
    """Full invoice with items."""

    client = ClientSummarySerializer(read_only=True)
    variable_symbol = serializers.CharField(read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)
    can_edit = serializers.SerializerMethodField()
    items = InvoiceItemSerializer(many=True, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id',
            'client',
            'variable_symbol',
            'issue_date',
            'due_date',
            'currency',
            'total_amount',
            'status',
            'is_paid',
            'is_canceled',
            'payment_date',
            'is_overdue',
            'can_edit',
            'note',
            'items',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_can_edit(self, obj):
        return obj.status == InvoiceStatus.DRAFT


class InvoiceListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    client = ClientSummarySerializer(read_only=True)
    variable_symbol = serializers.CharField(read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id',
            'client',
            'variable_symbol',
            'issue_date',
            'due_date',
            'currency',
            'total_amount',
            'status',
            'is_overdue',
        ]
        read_only_fields = fields


class InvoiceWriteSerializer(serializers.Serializer):
    """Input for creating an invoice or editing a draft."""

    client_id = serializers.UUIDField()
    issue_date = serializers.DateField()
    currency = serializers.RegexField(r'^[A-Za-z]{3}$', max_length=3)
    due_days = serializers.IntegerField(min_value=0, max_value=365, required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, default='')
    items = InvoiceItemInputSerializer(many=True, allow_empty=False)

    def validate_currency(self, value):
        return value.upper()


class InvoiceFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for invoice filtering.

    Query Parameters:
        status (str): Filter by status
        client (UUID): Filter by client
        date_from (date): Issued on or after
        date_to (date): Issued on or before
        overdue (bool): Only unpaid invoices past due date
    """

    status = serializers.ChoiceField(choices=InvoiceStatus.choices, required=False)
    client = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    overdue = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })
        return attrs


class InvoicePaymentSerializer(serializers.Serializer):
    spayd = serializers.CharField()
    iban = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    variable_symbol = serializers.CharField()


class InvoiceStatisticsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    paid = serializers.IntegerField()
    unpaid = serializers.IntegerField()
    canceled = serializers.IntegerField()
    overdue = serializers.IntegerField()
    total_revenue = serializers.DictField(child=serializers.DecimalField(max_digits=14, decimal_places=2))
    unpaid_amount = serializers.DictField(child=serializers.DecimalField(max_digits=14, decimal_places=2))
