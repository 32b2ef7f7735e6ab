from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone

from rest_framework import generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from telehealth_backend.core import capabilities
from telehealth_backend.core.utils import log_action
from telehealth_backend.patients.models import Patient
from telehealth_backend.patients.permissions import PatientPermission, PatientVerificationPermission
from telehealth_backend.patients.serializers import (
    PatientIdVerificationSerializer,
    PatientReadSerializer,
    PatientWriteSerializer,
)


def scoped_patients(user):
    qs = Patient.objects.select_related('user', 'primary_pharmacy')
    if capabilities.has_cap(user, capabilities.PATIENT_VIEW):
        return qs
    return qs.filter(Q(user=user) | Q(email=(user.email or '').lower()))


class PatientListCreateView(generics.ListCreateAPIView):
    """List patients or create a patient profile."""

    permission_classes = [PatientPermission]

    def get_queryset(self):
        qs = scoped_patients(self.request.user)
        state = self.request.query_params.get('state')
        if state:
            qs = qs.filter(state=state.upper())
        return qs.order_by('-created_at', '-id')

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return PatientWriteSerializer
        return PatientReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = PatientWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        owner = serializer.validated_data.pop('user', None)
        if owner is None or not capabilities.has_cap(request.user, capabilities.PATIENT_MANAGE):
            owner = request.user

        if Patient.objects.filter(user=owner).exists():
            return Response(
                {'detail': 'A patient profile already exists for this user.'},
                status=status.HTTP_400_BAD_REQUEST,
            )

        patient = serializer.save(user=owner, email=(owner.email or '').lower())
        log_action(request.user, 'patient_created', 'patient', patient.id, request=request)
        return Response(PatientReadSerializer(patient).data, status=status.HTTP_201_CREATED)


class PatientRetrieveUpdateView(generics.RetrieveUpdateAPIView):
    """Retrieve or update a patient."""

    permission_classes = [PatientPermission]

    def get_queryset(self):
        return scoped_patients(self.request.user)

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return PatientWriteSerializer
        return PatientReadSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        patient = self.get_object()
        if patient.user_id != request.user.id and not capabilities.has_cap(request.user, capabilities.PATIENT_MANAGE):
            raise PermissionDenied('You may only edit your own profile.')

        serializer = PatientWriteSerializer(patient, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.validated_data.pop('user', None)
        patient = serializer.save()
        log_action(
            request.user,
            'patient_updated',
            'patient',
            patient.id,
            changes={'fields': sorted(serializer.validated_data)},
            request=request,
        )
        return Response(PatientReadSerializer(patient).data)


class PatientMeView(APIView):
    """GET /api/patients/me/ - own patient profile."""

    permission_classes = [PatientPermission]

    def get(self, request, *args, **kwargs):
        patient = Patient.objects.select_related('user').filter(user=request.user).first()
        if patient is None:
            return Response({'detail': 'No patient profile.'}, status=status.HTTP_404_NOT_FOUND)
        return Response(PatientReadSerializer(patient).data)


class PatientConsentView(APIView):
    """POST /api/patients/<id>/consent/ - record signed consent."""

    permission_classes = [PatientPermission]

    def post(self, request, pk, *args, **kwargs):
        patient = get_object_or_404(scoped_patients(request.user), pk=pk)
        if patient.user_id != request.user.id and not capabilities.has_cap(request.user, capabilities.PATIENT_MANAGE):
            raise PermissionDenied('Only the patient can sign consent.')
        patient.consent_signed_at = timezone.now()
        patient.save(update_fields=['consent_signed_at', 'updated_at'])
        log_action(request.user, 'patient_consent_signed', 'patient', patient.id, request=request)
        return Response(PatientReadSerializer(patient).data)


class PatientIdVerificationView(APIView):
    """POST /api/patients/<id>/verify-id/ - record the ID check outcome."""

    permission_classes = [PatientVerificationPermission]

    def post(self, request, pk, *args, **kwargs):
        patient = get_object_or_404(Patient, pk=pk)
        serializer = PatientIdVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        old_status = patient.id_verification_status
        patient.id_verification_status = serializer.validated_data['status']
        if patient.id_verification_status == Patient.ID_VERIFIED:
            patient.id_verified_at = timezone.now()
        patient.save(update_fields=['id_verification_status', 'id_verified_at', 'updated_at'])

        log_action(
            request.user,
            'patient_id_verification',
            'patient',
            patient.id,
            changes={'from': old_status, 'to': patient.id_verification_status},
            request=request,
        )
        return Response(PatientReadSerializer(patient).data)
