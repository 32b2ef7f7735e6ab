"""
Intake endpoints.

Patients (intake:self) only ever see and edit intakes carrying their own
email address. Reviewers (intake:review) see every intake.
"""

from django.shortcuts import get_object_or_404

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from telehealth_backend.core import capabilities
from telehealth_backend.core.exceptions import PortalError, error_response
from telehealth_backend.core.utils import log_action
from telehealth_backend.intake import services
from telehealth_backend.intake.models import Intake
from telehealth_backend.intake.permissions import IntakePermission, IntakeReviewPermission
from telehealth_backend.intake.serializers import (
    IntakeCreateSerializer,
    IntakeReadSerializer,
    IntakeStepSerializer,
    TriageResultSerializer,
)
from telehealth_backend.patients.models import Patient


def scoped_intakes(user):
    qs = Intake.objects.select_related('patient')
    if capabilities.has_cap(user, capabilities.INTAKE_REVIEW):
        return qs
    return qs.filter(email=(user.email or '').lower())


class IntakeListCreateView(generics.ListCreateAPIView):
    permission_classes = [IntakePermission]
    serializer_class = IntakeReadSerializer

    def get_queryset(self):
        qs = scoped_intakes(self.request.user)
        params = self.request.query_params
        if params.get('email'):
            qs = qs.filter(email=params['email'].strip().lower())
        if params.get('status'):
            qs = qs.filter(status=params['status'])
        if params.get('patient'):
            qs = qs.filter(patient_id=params['patient'])
        return qs.order_by('-created_at', '-id')

    def create(self, request, *args, **kwargs):
        serializer = IntakeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if capabilities.has_cap(request.user, capabilities.INTAKE_REVIEW):
            email = data.get('email') or request.user.email
            patient = data.get('patient')
        else:
            email = request.user.email
            patient = Patient.objects.filter(user=request.user).first()

        if not email:
            return Response({'email': ['This field is required.']}, status=status.HTTP_400_BAD_REQUEST)

        intake = services.create_intake(
            email=email,
            patient=patient,
            chief_complaint=data.get('chief_complaint', ''),
        )
        log_action(request.user, 'intake_created', 'intake', intake.id, request=request)
        return Response(IntakeReadSerializer(intake).data, status=status.HTTP_201_CREATED)


class IntakeDetailView(generics.RetrieveAPIView):
    permission_classes = [IntakePermission]
    serializer_class = IntakeReadSerializer

    def get_queryset(self):
        return scoped_intakes(self.request.user)


class IntakeLatestView(APIView):
    """GET /api/intakes/latest/ - caller's most recent intake."""

    permission_classes = [IntakePermission]

    def get(self, request, *args, **kwargs):
        intake = services.latest_for_email(request.user.email)
        if intake is None:
            return Response({'detail': 'No intake found.'}, status=status.HTTP_404_NOT_FOUND)
        return Response(IntakeReadSerializer(intake).data)


class IntakeStepView(APIView):
    """POST /api/intakes/<id>/steps/ body {step, data}"""

    permission_classes = [IntakePermission]

    def post(self, request, pk, *args, **kwargs):
        intake = get_object_or_404(scoped_intakes(request.user), pk=pk)
        serializer = IntakeStepSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            intake = services.record_step(
                intake,
                serializer.validated_data['step'],
                serializer.validated_data.get('data'),
            )
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'intake_step_recorded',
            'intake',
            intake.id,
            changes={'step': serializer.validated_data['step']},
            request=request,
        )
        return Response({
            'success': True,
            'completed_steps': intake.completed_steps,
            'intake': IntakeReadSerializer(intake).data,
        })


class IntakeCompleteView(APIView):
    permission_classes = [IntakePermission]

    def post(self, request, pk, *args, **kwargs):
        intake = get_object_or_404(scoped_intakes(request.user), pk=pk)
        try:
            intake = services.complete_intake(intake)
        except PortalError as e:
            return error_response(e)

        log_action(request.user, 'intake_completed', 'intake', intake.id, request=request)
        return Response({'success': True, 'intake': IntakeReadSerializer(intake).data})


class IntakeTriageView(APIView):
    """POST /api/intakes/<id>/triage/ - attach a triage assessment."""

    permission_classes = [IntakeReviewPermission]

    def post(self, request, pk, *args, **kwargs):
        intake = get_object_or_404(Intake, pk=pk)
        serializer = TriageResultSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        intake = services.record_triage(intake, **serializer.validated_data)
        log_action(
            request.user,
            'intake_triaged',
            'intake',
            intake.id,
            changes={'urgency_level': intake.triage_result['urgency_level']},
            request=request,
        )
        return Response(IntakeReadSerializer(intake).data)
