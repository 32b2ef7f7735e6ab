from rest_framework import serializers

from telehealth_backend.intake.models import Intake
from telehealth_backend.patients.models import Patient


class IntakeReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Intake
        fields = [
            'id',
            'patient',
            'email',
            'status',
            'medical_history',
            'current_symptoms',
            'medications',
            'allergies',
            'chief_complaint',
            'symptom_duration',
            'severity_level',
            'vital_signs',
            'id_verified',
            'consent_given',
            'completed_steps',
            'triage_result',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class IntakeCreateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    patient = serializers.PrimaryKeyRelatedField(queryset=Patient.objects.all(), required=False, allow_null=True)
    chief_complaint = serializers.CharField(required=False, allow_blank=True)


class IntakeStepSerializer(serializers.Serializer):
    step = serializers.CharField(max_length=64)
    data = serializers.JSONField(required=False, allow_null=True)


class TriageResultSerializer(serializers.Serializer):
    urgency_level = serializers.ChoiceField(choices=['low', 'moderate', 'high', 'emergency'])
    urgency_score = serializers.IntegerField(min_value=0, max_value=100)
    recommended_action = serializers.CharField()
