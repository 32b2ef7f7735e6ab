from rest_framework import serializers

from telehealth_backend.pharmacies.models import Pharmacy


class PharmacyReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pharmacy
        fields = [
            'id',
            'name',
            'ncpdp_id',
            'npi_number',
            'street',
            'city',
            'state',
            'zip_code',
            'phone',
            'fax',
            'email',
            'type',
            'accepts_e_prescribe',
            'capabilities',
            'tier',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PharmacyWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pharmacy
        fields = [
            'name',
            'ncpdp_id',
            'npi_number',
            'street',
            'city',
            'state',
            'zip_code',
            'phone',
            'fax',
            'email',
            'type',
            'accepts_e_prescribe',
            'capabilities',
            'tier',
            'status',
        ]

    def validate_state(self, value):
        value = (value or '').strip().upper()
        if value and len(value) != 2:
            raise serializers.ValidationError('state must be a two-letter code.')
        return value

    def validate_npi_number(self, value):
        value = (value or '').strip()
        if value and (len(value) != 10 or not value.isdigit()):
            raise serializers.ValidationError('npi_number must be 10 digits.')
        return value

    def validate_capabilities(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError('capabilities must be a list.')
        return value


class PharmacySearchSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    state = serializers.CharField(required=False, allow_blank=True, max_length=2)
    zip = serializers.CharField(required=False, allow_blank=True, max_length=10)

    def validate(self, attrs):
        if not any((attrs.get(k) or '').strip() for k in ('name', 'city', 'state', 'zip')):
            raise serializers.ValidationError('Provide at least one of name, city, state or zip.')
        return attrs
