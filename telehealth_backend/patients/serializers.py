from rest_framework import serializers

from telehealth_backend.core.models import User
from telehealth_backend.patients.models import Patient
from telehealth_backend.pharmacies.models import Pharmacy


class PatientReadSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Patient
        fields = [
            'id',
            'user',
            'email',
            'display_name',
            'date_of_birth',
            'gender',
            'street',
            'city',
            'state',
            'zip_code',
            'insurance_provider',
            'insurance_policy_number',
            'insurance_group_number',
            'primary_pharmacy',
            'allergies',
            'current_medications',
            'medical_conditions',
            'emergency_contact',
            'consent_signed_at',
            'id_verification_status',
            'id_verified_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PatientWriteSerializer(serializers.ModelSerializer):
    """Create/update a patient profile.

    ``user`` may only be chosen by staff; patients always write their own.
    """

    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False)
    primary_pharmacy = serializers.PrimaryKeyRelatedField(
        queryset=Pharmacy.objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Patient
        fields = [
            'user',
            'date_of_birth',
            'gender',
            'street',
            'city',
            'state',
            'zip_code',
            'insurance_provider',
            'insurance_policy_number',
            'insurance_group_number',
            'primary_pharmacy',
            'allergies',
            'current_medications',
            'medical_conditions',
            'emergency_contact',
        ]

    def validate_state(self, value):
        value = (value or '').strip().upper()
        if value and len(value) != 2:
            raise serializers.ValidationError('state must be a two-letter code.')
        return value

    def _validate_string_list(self, value, name):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise serializers.ValidationError(f'{name} must be a list of strings.')
        return value

    def validate_allergies(self, value):
        return self._validate_string_list(value, 'allergies')

    def validate_current_medications(self, value):
        return self._validate_string_list(value, 'current_medications')

    def validate_medical_conditions(self, value):
        return self._validate_string_list(value, 'medical_conditions')

    def validate_emergency_contact(self, value):
        if value is None:
            return value
        if not isinstance(value, dict) or not value.get('name') or not value.get('phone'):
            raise serializers.ValidationError('emergency_contact needs name and phone.')
        return value


class PatientIdVerificationSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Patient.ID_VERIFICATION_CHOICES)
