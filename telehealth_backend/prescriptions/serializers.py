from rest_framework import serializers

from telehealth_backend.consultations.models import Consultation
from telehealth_backend.pharmacies.models import Pharmacy
from telehealth_backend.prescriptions.models import FaxLog, Prescription, RefillRequest
from telehealth_backend.providers.models import Provider


class PrescriptionReadSerializer(serializers.ModelSerializer):
    refills_remaining = serializers.IntegerField(read_only=True)

    class Meta:
        model = Prescription
        fields = [
            'id',
            'consultation',
            'patient',
            'provider',
            'pharmacy',
            'medication_name',
            'generic_name',
            'ndc',
            'dosage',
            'form',
            'quantity',
            'days_supply',
            'refills_authorized',
            'refills_used',
            'refills_remaining',
            'directions',
            'dea_schedule',
            'status',
            'e_prescribe_id',
            'sent_to_pharmacy_at',
            'filled_at',
            'expires_at',
            'next_refill_date',
            'prior_auth_required',
            'prior_auth_status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PrescriptionCreateSerializer(serializers.ModelSerializer):
    consultation = serializers.PrimaryKeyRelatedField(queryset=Consultation.objects.all())
    provider = serializers.PrimaryKeyRelatedField(queryset=Provider.objects.all(), required=False)
    pharmacy = serializers.PrimaryKeyRelatedField(queryset=Pharmacy.objects.all(), required=False, allow_null=True)
    expires_at = serializers.DateTimeField(required=False)

    class Meta:
        model = Prescription
        fields = [
            'consultation',
            'provider',
            'pharmacy',
            'medication_name',
            'generic_name',
            'ndc',
            'dosage',
            'form',
            'quantity',
            'days_supply',
            'refills_authorized',
            'directions',
            'dea_schedule',
            'expires_at',
            'prior_auth_required',
        ]

    def validate_quantity(self, value):
        if value < 1:
            raise serializers.ValidationError('quantity must be at least 1.')
        return value

    def validate_days_supply(self, value):
        if value < 1:
            raise serializers.ValidationError('days_supply must be at least 1.')
        return value


class PrescriptionSendSerializer(serializers.Serializer):
    pharmacy = serializers.PrimaryKeyRelatedField(queryset=Pharmacy.objects.all())
    e_prescribe_id = serializers.CharField(required=False, allow_blank=True, default='')


class PrescriptionStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Prescription.STATUS_CHOICES)


class PrescriptionFaxSerializer(serializers.Serializer):
    pharmacy = serializers.PrimaryKeyRelatedField(queryset=Pharmacy.objects.all(), required=False)


class RefillRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = RefillRequest
        fields = [
            'id',
            'prescription',
            'patient',
            'pharmacy',
            'status',
            'requested_at',
            'processed_at',
            'processed_by',
            'denial_reason',
        ]
        read_only_fields = fields


class RefillCreateSerializer(serializers.Serializer):
    pharmacy = serializers.PrimaryKeyRelatedField(queryset=Pharmacy.objects.all(), required=False, allow_null=True)


class RefillDenySerializer(serializers.Serializer):
    reason = serializers.CharField()


class FaxLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = FaxLog
        fields = [
            'id',
            'prescription',
            'pharmacy',
            'fax_number',
            'status',
            'provider_fax_id',
            'pages',
            'error_message',
            'attempts',
            'sent_at',
            'confirmed_at',
            'created_at',
        ]
        read_only_fields = fields


class FaxStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=FaxLog.STATUS_CHOICES)
    provider_fax_id = serializers.CharField(required=False, allow_blank=True)
    error_message = serializers.CharField(required=False, allow_blank=True)
    pages = serializers.IntegerField(required=False, min_value=0)
