from rest_framework import serializers

from telehealth_backend.core.models import User
from telehealth_backend.providers.models import Provider


class ProviderReadSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Provider
        fields = [
            'id',
            'user',
            'email',
            'first_name',
            'last_name',
            'display_name',
            'title',
            'npi_number',
            'dea_number',
            'specialties',
            'licensed_states',
            'availability',
            'accepting_patients',
            'consultation_rate',
            'max_daily_consultations',
            'current_queue_size',
            'total_consultations',
            'status',
            'credential_verified_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProviderWriteSerializer(serializers.ModelSerializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False, allow_null=True)

    class Meta:
        model = Provider
        fields = [
            'user',
            'email',
            'first_name',
            'last_name',
            'title',
            'npi_number',
            'dea_number',
            'specialties',
            'licensed_states',
            'consultation_rate',
            'max_daily_consultations',
        ]

    def validate_email(self, value):
        return value.strip().lower()

    def validate_npi_number(self, value):
        value = (value or '').strip()
        if len(value) != 10 or not value.isdigit():
            raise serializers.ValidationError('npi_number must be 10 digits.')
        qs = Provider.objects.filter(npi_number=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A provider with this NPI number already exists.')
        return value

    def validate_licensed_states(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError('licensed_states must be a list.')
        cleaned = []
        for state in value:
            state = str(state).strip().upper()
            if len(state) != 2:
                raise serializers.ValidationError(f'Invalid state code: {state!r}.')
            if state not in cleaned:
                cleaned.append(state)
        return cleaned

    def validate_specialties(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError('specialties must be a list.')
        return value


class ProviderAvailabilitySerializer(serializers.Serializer):
    accepting_patients = serializers.BooleanField(required=False)
    max_daily_consultations = serializers.IntegerField(required=False, min_value=0)
    availability = serializers.JSONField(required=False, allow_null=True)


class ProviderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Provider.STATUS_CHOICES)


class NpiVerificationSerializer(serializers.Serializer):
    npi_number = serializers.CharField(max_length=32)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)
    provider = serializers.PrimaryKeyRelatedField(queryset=Provider.objects.all(), required=False, allow_null=True)
