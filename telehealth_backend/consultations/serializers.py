from rest_framework import serializers

from telehealth_backend.consultations.models import Consultation
from telehealth_backend.intake.models import Intake
from telehealth_backend.patients.models import Patient
from telehealth_backend.providers.models import Provider


class ConsultationReadSerializer(serializers.ModelSerializer):
    provider_name = serializers.SerializerMethodField()

    class Meta:
        model = Consultation
        fields = [
            'id',
            'patient',
            'provider',
            'provider_name',
            'intake',
            'type',
            'status',
            'scheduled_at',
            'started_at',
            'ended_at',
            'duration_minutes',
            'room_url',
            'room_token',
            'chief_complaint',
            'notes',
            'diagnosis',
            'diagnosis_codes',
            'treatment_plan',
            'follow_up_required',
            'follow_up_date',
            'recording',
            'patient_state',
            'cost',
            'payment_status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_provider_name(self, obj):
        return obj.provider.display_name if obj.provider_id else None


class ConsultationCreateSerializer(serializers.Serializer):
    patient = serializers.PrimaryKeyRelatedField(queryset=Patient.objects.all(), required=False)
    provider = serializers.PrimaryKeyRelatedField(queryset=Provider.objects.all(), required=False, allow_null=True)
    intake = serializers.PrimaryKeyRelatedField(queryset=Intake.objects.all(), required=False, allow_null=True)
    type = serializers.ChoiceField(choices=Consultation.TYPE_CHOICES, default=Consultation.TYPE_VIDEO)
    scheduled_at = serializers.DateTimeField(required=False, allow_null=True)
    patient_state = serializers.CharField(max_length=2, required=False, allow_blank=True)
    cost = serializers.IntegerField(min_value=0, default=0)


class ConsultationScheduleSerializer(serializers.Serializer):
    scheduled_at = serializers.DateTimeField()
    room_url = serializers.URLField(required=False, allow_blank=True)
    room_token = serializers.CharField(required=False, allow_blank=True)


class ConsultationCompleteSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    diagnosis_codes = serializers.ListField(child=serializers.CharField(), required=False)
    treatment_plan = serializers.CharField(required=False, allow_blank=True)
    follow_up_required = serializers.BooleanField(required=False, default=False)
    follow_up_date = serializers.DateTimeField(required=False, allow_null=True)


class ConsultationCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class FromIntakeSerializer(serializers.Serializer):
    intake = serializers.PrimaryKeyRelatedField(queryset=Intake.objects.all())
    patient = serializers.PrimaryKeyRelatedField(queryset=Patient.objects.all())
    patient_state = serializers.CharField(max_length=2)
    recording = serializers.CharField(required=False, allow_blank=True, default='')


class EnqueueSerializer(serializers.Serializer):
    chief_complaint = serializers.CharField(required=False, allow_blank=True, default='')
    patient_state = serializers.CharField(max_length=2, required=False, allow_blank=True, default='')
    intake = serializers.PrimaryKeyRelatedField(queryset=Intake.objects.all(), required=False, allow_null=True)
    type = serializers.ChoiceField(choices=Consultation.TYPE_CHOICES, default=Consultation.TYPE_VIDEO)


class QueueEntrySerializer(serializers.Serializer):
    id = serializers.IntegerField(source='consultation.id')
    type = serializers.CharField(source='consultation.type')
    patient = serializers.IntegerField(source='consultation.patient_id')
    patient_state = serializers.CharField(source='consultation.patient_state')
    created_at = serializers.DateTimeField(source='consultation.created_at')
    patient_name = serializers.CharField()
    patient_initials = serializers.CharField()
    chief_complaint = serializers.CharField()
    wait_minutes = serializers.IntegerField()
