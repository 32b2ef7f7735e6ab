"""
Prescription, refill and fax-log endpoints.

Role scoping:
- patients: prescriptions written for them
- providers: prescriptions they wrote
- pharmacies: prescriptions routed to their pharmacy
- nurses and admins: everything
"""

from django.db.models import Q
from django.shortcuts import get_object_or_404

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from telehealth_backend.core import capabilities
from telehealth_backend.core.exceptions import IntegrationError, PortalError, error_response
from telehealth_backend.core.models import Role
from telehealth_backend.core.utils import log_action
from telehealth_backend.patients.models import Patient
from telehealth_backend.prescriptions import services
from telehealth_backend.prescriptions.models import FaxLog, Prescription, RefillRequest
from telehealth_backend.prescriptions.permissions import (
    FaxLogPermission,
    PrescriptionFaxPermission,
    PrescriptionPermission,
    PrescriptionSendPermission,
    PrescriptionSignPermission,
    PrescriptionStatusPermission,
    RefillDecisionPermission,
    RefillPermission,
)
from telehealth_backend.prescriptions.serializers import (
    FaxLogSerializer,
    FaxStatusSerializer,
    PrescriptionCreateSerializer,
    PrescriptionFaxSerializer,
    PrescriptionReadSerializer,
    PrescriptionSendSerializer,
    PrescriptionStatusSerializer,
    RefillCreateSerializer,
    RefillDenySerializer,
    RefillRequestSerializer,
)
from telehealth_backend.providers.services import provider_for_user

DEFAULT_LIMIT = 100
MAX_LIMIT = 500


def scoped_prescriptions(user):
    qs = Prescription.objects.select_related('patient__user', 'provider', 'pharmacy', 'consultation')
    role = capabilities.role_name_of(user)
    email = (user.email or '').lower()
    if role == Role.PATIENT:
        return qs.filter(Q(patient__user=user) | Q(patient__email=email))
    if role == Role.PROVIDER:
        return qs.filter(Q(provider__user=user) | Q(provider__email=email))
    if role == Role.PHARMACY:
        pharmacy = services.pharmacy_for_user(user)
        return qs.filter(pharmacy=pharmacy) if pharmacy is not None else qs.none()
    return qs


def _parse_limit(raw):
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    return max(1, min(limit, MAX_LIMIT))


class PrescriptionListCreateView(generics.ListCreateAPIView):
    """List prescriptions (?status=&patient=&provider=&pharmacy=&consultation=&limit=) or write one."""

    permission_classes = [PrescriptionPermission]
    serializer_class = PrescriptionReadSerializer

    def get_queryset(self):
        qs = scoped_prescriptions(self.request.user)
        params = self.request.query_params
        for field in ('status', 'patient', 'provider', 'pharmacy', 'consultation'):
            value = params.get(field)
            if value:
                qs = qs.filter(**{field: value})
        return qs.order_by('-created_at', '-id')[:_parse_limit(params.get('limit'))]

    def create(self, request, *args, **kwargs):
        serializer = PrescriptionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        own_provider = provider_for_user(request.user)
        provider = data.pop('provider', None)
        if provider is None or not capabilities.is_admin(request.user):
            provider = own_provider
        if provider is None:
            return Response({'provider': ['No provider record for this account.']}, status=status.HTTP_400_BAD_REQUEST)

        rx = services.create_prescription(provider=provider, **data)
        log_action(
            request.user,
            'prescription_created',
            'prescription',
            rx.id,
            changes={'medication': rx.medication_name, 'patient': rx.patient_id},
            request=request,
        )
        return Response(PrescriptionReadSerializer(rx).data, status=status.HTTP_201_CREATED)


class PrescriptionDetailView(generics.RetrieveAPIView):
    permission_classes = [PrescriptionPermission]
    serializer_class = PrescriptionReadSerializer

    def get_queryset(self):
        return scoped_prescriptions(self.request.user)


class PrescriptionSignView(APIView):
    permission_classes = [PrescriptionSignPermission]

    def post(self, request, pk, *args, **kwargs):
        rx = get_object_or_404(Prescription, pk=pk)
        try:
            rx = services.sign(rx, provider=provider_for_user(request.user))
        except PortalError as e:
            return error_response(e)

        log_action(request.user, 'prescription_signed', 'prescription', rx.id, request=request)
        return Response(PrescriptionReadSerializer(rx).data)


class PrescriptionSendView(APIView):
    permission_classes = [PrescriptionSendPermission]

    def post(self, request, pk, *args, **kwargs):
        rx = get_object_or_404(scoped_prescriptions(request.user), pk=pk)
        serializer = PrescriptionSendSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            rx = services.send_to_pharmacy(
                rx,
                pharmacy=serializer.validated_data['pharmacy'],
                e_prescribe_id=serializer.validated_data.get('e_prescribe_id', ''),
            )
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'prescription_sent',
            'prescription',
            rx.id,
            changes={'pharmacy': rx.pharmacy_id},
            request=request,
        )
        return Response(PrescriptionReadSerializer(rx).data)


class PrescriptionStatusView(APIView):
    permission_classes = [PrescriptionStatusPermission]

    def post(self, request, pk, *args, **kwargs):
        rx = get_object_or_404(scoped_prescriptions(request.user), pk=pk)
        serializer = PrescriptionStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        old_status = rx.status
        try:
            rx = services.update_status(rx, serializer.validated_data['status'])
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'prescription_status_changed',
            'prescription',
            rx.id,
            changes={'from': old_status, 'to': rx.status},
            request=request,
        )
        return Response(PrescriptionReadSerializer(rx).data)


class PrescriptionFaxView(APIView):
    """POST /api/prescriptions/<id>/fax/ - fax to the given (or assigned) pharmacy."""

    permission_classes = [PrescriptionFaxPermission]

    def post(self, request, pk, *args, **kwargs):
        rx = get_object_or_404(scoped_prescriptions(request.user), pk=pk)
        serializer = PrescriptionFaxSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        pharmacy = serializer.validated_data.get('pharmacy') or rx.pharmacy
        if pharmacy is None:
            return Response({'detail': 'Pharmacy not found'}, status=status.HTTP_404_NOT_FOUND)

        try:
            log = services.fax_prescription(rx, pharmacy)
        except IntegrationError as e:
            body = e.to_dict()
            return Response(body, status=status.HTTP_502_BAD_GATEWAY)
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'prescription_faxed',
            'prescription',
            rx.id,
            changes={'fax_log': log.id, 'pharmacy': pharmacy.id},
            request=request,
        )
        return Response(
            {'fax_log': log.id, 'provider_fax_id': log.provider_fax_id, 'status': log.status},
            status=status.HTTP_201_CREATED,
        )


def scoped_refills(user):
    qs = RefillRequest.objects.select_related('prescription', 'patient', 'pharmacy')
    role = capabilities.role_name_of(user)
    email = (user.email or '').lower()
    if role == Role.PATIENT:
        return qs.filter(Q(patient__user=user) | Q(patient__email=email))
    if role == Role.PROVIDER:
        return qs.filter(Q(prescription__provider__user=user) | Q(prescription__provider__email=email))
    if role == Role.PHARMACY:
        pharmacy = services.pharmacy_for_user(user)
        return qs.filter(pharmacy=pharmacy) if pharmacy is not None else qs.none()
    return qs


class PrescriptionRefillCreateView(APIView):
    """POST /api/prescriptions/<id>/refills/"""

    permission_classes = [RefillPermission]

    def post(self, request, pk, *args, **kwargs):
        rx = get_object_or_404(Prescription.objects.select_related('patient', 'pharmacy'), pk=pk)
        serializer = RefillCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        patient = None
        if capabilities.role_name_of(request.user) == Role.PATIENT:
            patient = Patient.objects.filter(user=request.user).first()
            if patient is None:
                return Response({'detail': 'Prescription does not belong to this patient'}, status=status.HTTP_403_FORBIDDEN)

        try:
            refill = services.request_refill(rx, patient=patient, pharmacy=serializer.validated_data.get('pharmacy'))
        except PortalError as e:
            return error_response(e)

        log_action(request.user, 'refill_requested', 'refill_request', refill.id, request=request)
        return Response(RefillRequestSerializer(refill).data, status=status.HTTP_201_CREATED)


class RefillListView(generics.ListAPIView):
    """GET /api/refills/?status=&patient=&prescription="""

    permission_classes = [RefillPermission]
    serializer_class = RefillRequestSerializer

    def get_queryset(self):
        qs = scoped_refills(self.request.user)
        params = self.request.query_params
        for field in ('status', 'patient', 'prescription'):
            value = params.get(field)
            if value:
                qs = qs.filter(**{field: value})
        return qs.order_by('-requested_at', '-id')


class RefillApproveView(APIView):
    permission_classes = [RefillDecisionPermission]

    def post(self, request, pk, *args, **kwargs):
        refill = get_object_or_404(RefillRequest, pk=pk)
        try:
            refill = services.approve_refill(refill, provider=provider_for_user(request.user))
        except PortalError as e:
            return error_response(e)

        log_action(request.user, 'refill_approved', 'refill_request', refill.id, request=request)
        return Response(RefillRequestSerializer(refill).data)


class RefillDenyView(APIView):
    permission_classes = [RefillDecisionPermission]

    def post(self, request, pk, *args, **kwargs):
        refill = get_object_or_404(RefillRequest.objects.select_related('prescription__patient'), pk=pk)
        serializer = RefillDenySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            refill = services.deny_refill(
                refill,
                reason=serializer.validated_data['reason'],
                provider=provider_for_user(request.user),
            )
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'refill_denied',
            'refill_request',
            refill.id,
            changes={'reason': refill.denial_reason},
            request=request,
        )
        return Response(RefillRequestSerializer(refill).data)


class FaxLogListView(generics.ListAPIView):
    """GET /api/fax-logs/?prescription=&status="""

    permission_classes = [FaxLogPermission]
    serializer_class = FaxLogSerializer

    def get_queryset(self):
        rx_ids = scoped_prescriptions(self.request.user).values('id')
        qs = FaxLog.objects.filter(prescription_id__in=rx_ids)
        params = self.request.query_params
        if params.get('prescription'):
            qs = qs.filter(prescription_id=params['prescription'])
        if params.get('status'):
            qs = qs.filter(status=params['status'])
        return qs.order_by('-created_at', '-id')


class FaxLogStatusView(APIView):
    """POST /api/fax-logs/<id>/status/ - delivery updates from the fax provider."""

    permission_classes = [FaxLogPermission]

    def post(self, request, pk, *args, **kwargs):
        log = get_object_or_404(FaxLog, pk=pk)
        serializer = FaxStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        old_status = log.status
        log = services.update_fax_status(
            log,
            data['status'],
            provider_fax_id=data.get('provider_fax_id'),
            error_message=data.get('error_message'),
            pages=data.get('pages'),
        )
        log_action(
            request.user,
            'fax_status_changed',
            'fax_log',
            log.id,
            changes={'from': old_status, 'to': log.status},
            request=request,
        )
        return Response(FaxLogSerializer(log).data)
