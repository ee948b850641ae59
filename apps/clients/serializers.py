from rest_framework import serializers

from .models import Client


class ClientSerializer(serializers.ModelSerializer):
    """Client with contact and tax details."""

    class Meta:
        model = Client
        fields = [
            'id',
            'name',
            'company_id',
            'vat_id',
            'email',
            'address',
            'city',
            'zip_code',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Client name is required')
        return value
