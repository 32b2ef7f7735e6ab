"""
Consultation endpoints.

Role scoping for reads and actions:
- patients see consultations for their own patient record
- providers see consultations assigned to them
- everyone else holding patient:view (nurses, admins) sees all
"""

from django.db.models import Q
from django.shortcuts import get_object_or_404

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from telehealth_backend.consultations import services
from telehealth_backend.consultations.models import Consultation
from telehealth_backend.consultations.permissions import (
    ConsultationPermission,
    ConsultationQueuePermission,
    ConsultationStartPermission,
)
from telehealth_backend.consultations.serializers import (
    ConsultationCancelSerializer,
    ConsultationCompleteSerializer,
    ConsultationCreateSerializer,
    ConsultationReadSerializer,
    ConsultationScheduleSerializer,
    EnqueueSerializer,
    FromIntakeSerializer,
    QueueEntrySerializer,
)
from telehealth_backend.core import capabilities
from telehealth_backend.core.exceptions import PortalError, error_response
from telehealth_backend.core.models import Role
from telehealth_backend.core.utils import log_action
from telehealth_backend.patients.models import Patient
from telehealth_backend.providers.services import provider_for_user


def scoped_consultations(user):
    qs = Consultation.objects.select_related('patient__user', 'provider', 'intake')
    role = capabilities.role_name_of(user)
    email = (user.email or '').lower()
    if role == Role.PATIENT:
        return qs.filter(Q(patient__user=user) | Q(patient__email=email))
    if role == Role.PROVIDER:
        return qs.filter(Q(provider__user=user) | Q(provider__email=email))
    if capabilities.has_cap(user, capabilities.PATIENT_VIEW):
        return qs
    return qs.none()


class ConsultationListCreateView(generics.ListCreateAPIView):
    """List consultations (?patient=&provider=&status=) or book one."""

    permission_classes = [ConsultationPermission]
    serializer_class = ConsultationReadSerializer

    def get_queryset(self):
        qs = scoped_consultations(self.request.user)
        params = self.request.query_params
        if params.get('patient'):
            qs = qs.filter(patient_id=params['patient'])
        if params.get('provider'):
            qs = qs.filter(provider_id=params['provider'])
        if params.get('status'):
            qs = qs.filter(status=params['status'])
        return qs.order_by('-created_at', '-id')

    def create(self, request, *args, **kwargs):
        serializer = ConsultationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        if capabilities.has_cap(request.user, capabilities.PATIENT_VIEW):
            patient = data.pop('patient', None)
        else:
            data.pop('patient', None)
            patient = Patient.objects.filter(user=request.user).first()
        if patient is None:
            return Response({'patient': ['This field is required.']}, status=status.HTTP_400_BAD_REQUEST)

        consultation = services.create_consultation(patient=patient, **data)
        log_action(request.user, 'consultation_created', 'consultation', consultation.id, request=request)
        return Response(ConsultationReadSerializer(consultation).data, status=status.HTTP_201_CREATED)


class ConsultationDetailView(generics.RetrieveAPIView):
    permission_classes = [ConsultationPermission]
    serializer_class = ConsultationReadSerializer

    def get_queryset(self):
        return scoped_consultations(self.request.user)


class _ConsultationActionView(APIView):
    """Shared plumbing for POST /api/consultations/<id>/<action>/."""

    permission_classes = [ConsultationStartPermission]
    input_serializer_class = None
    audit_action = ''

    def get_consultation(self, request, pk):
        user = request.user
        if capabilities.is_admin(user):
            return get_object_or_404(Consultation, pk=pk)
        return get_object_or_404(scoped_consultations(user), pk=pk)

    def perform(self, consultation, data):
        raise NotImplementedError

    def post(self, request, pk, *args, **kwargs):
        consultation = self.get_consultation(request, pk)
        data = {}
        if self.input_serializer_class is not None:
            serializer = self.input_serializer_class(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

        old_status = consultation.status
        try:
            consultation = self.perform(consultation, data)
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            self.audit_action,
            'consultation',
            consultation.id,
            changes={'from': old_status, 'to': consultation.status},
            request=request,
        )
        return Response(ConsultationReadSerializer(consultation).data)


class ConsultationScheduleView(_ConsultationActionView):
    input_serializer_class = ConsultationScheduleSerializer
    audit_action = 'consultation_scheduled'

    def perform(self, consultation, data):
        return services.schedule(
            consultation,
            scheduled_at=data['scheduled_at'],
            room_url=data.get('room_url'),
            room_token=data.get('room_token'),
        )


class ConsultationStartView(_ConsultationActionView):
    audit_action = 'consultation_started'

    def perform(self, consultation, data):
        return services.start(consultation)


class ConsultationCompleteView(_ConsultationActionView):
    input_serializer_class = ConsultationCompleteSerializer
    audit_action = 'consultation_completed'

    def perform(self, consultation, data):
        return services.complete(consultation, **data)


class ConsultationCancelView(_ConsultationActionView):
    permission_classes = [ConsultationPermission]
    input_serializer_class = ConsultationCancelSerializer
    audit_action = 'consultation_cancelled'

    def perform(self, consultation, data):
        return services.cancel(consultation, reason=data.get('reason', ''))


class ConsultationNoShowView(_ConsultationActionView):
    audit_action = 'consultation_no_show'

    def perform(self, consultation, data):
        return services.mark_no_show(consultation)


class ConsultationClaimView(APIView):
    """POST /api/consultations/<id>/claim/ - provider takes a waiting patient."""

    permission_classes = [ConsultationStartPermission]

    def post(self, request, pk, *args, **kwargs):
        try:
            consultation = services.claim(pk, provider=provider_for_user(request.user))
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'consultation_claimed',
            'consultation',
            consultation.id,
            changes={'provider': consultation.provider_id},
            request=request,
        )
        return Response({
            'success': True,
            'consultation': ConsultationReadSerializer(consultation).data,
        })


class ConsultationRoomView(_ConsultationActionView):
    """POST /api/consultations/<id>/room/ - provision the video room."""

    permission_classes = [ConsultationPermission]

    def post(self, request, pk, *args, **kwargs):
        consultation = self.get_consultation(request, pk)
        try:
            room = services.provision_room(consultation)
        except PortalError as e:
            return error_response(e)

        log_action(request.user, 'consultation_room_created', 'consultation', consultation.id, request=request)
        return Response(room, status=status.HTTP_201_CREATED)


class ConsultationFromIntakeView(APIView):
    """POST /api/consultations/from-intake/"""

    permission_classes = [ConsultationPermission]

    def post(self, request, *args, **kwargs):
        serializer = FromIntakeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        patient = data['patient']
        if not capabilities.has_cap(request.user, capabilities.PATIENT_VIEW) and patient.user_id != request.user.id:
            return Response({'detail': 'You may only start your own consultation.'}, status=status.HTTP_403_FORBIDDEN)

        try:
            consultation = services.create_from_intake(
                intake=data['intake'],
                patient=patient,
                patient_state=data['patient_state'],
                recording=data.get('recording', ''),
            )
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'consultation_created_from_intake',
            'consultation',
            consultation.id,
            changes={'provider': consultation.provider_id, 'intake': consultation.intake_id},
            request=request,
        )
        return Response(
            {
                'consultation': consultation.id,
                'provider': consultation.provider_id,
                'data': ConsultationReadSerializer(consultation).data,
            },
            status=status.HTTP_201_CREATED,
        )


class ConsultationEnqueueView(APIView):
    """POST /api/consultations/enqueue/ - patient joins the waiting room."""

    permission_classes = [ConsultationPermission]

    def post(self, request, *args, **kwargs):
        patient = Patient.objects.filter(user=request.user).first()
        if patient is None:
            return Response(
                {'detail': 'Patient record not found. Complete intake first.'},
                status=status.HTTP_404_NOT_FOUND,
            )

        serializer = EnqueueSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        consultation = services.enqueue(
            patient=patient,
            patient_state=data.get('patient_state') or patient.state,
            chief_complaint=data.get('chief_complaint', ''),
            intake=data.get('intake'),
            type=data['type'],
        )
        log_action(request.user, 'consultation_enqueued', 'consultation', consultation.id, request=request)
        return Response(
            {'consultation': consultation.id, 'status': consultation.status},
            status=status.HTTP_201_CREATED,
        )


class WaitingQueueView(APIView):
    """GET /api/consultations/queue/ - waiting room, oldest first."""

    permission_classes = [ConsultationQueuePermission]

    def get(self, request, *args, **kwargs):
        rows = services.waiting_queue(limit=50)
        return Response(QueueEntrySerializer(rows, many=True).data)


class ActiveConsultationView(APIView):
    """GET /api/consultations/active/ - caller's open consultation, or 204."""

    permission_classes = [ConsultationPermission]

    def get(self, request, *args, **kwargs):
        patient = Patient.objects.filter(user=request.user).first()
        consultation = services.active_for_patient(patient)
        if consultation is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(ConsultationReadSerializer(consultation).data)
