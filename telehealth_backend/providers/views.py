"""Provider directory, availability and credential checks."""

import logging

from django.shortcuts import get_object_or_404
from django.utils import timezone

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from telehealth_backend.core.utils import log_action
from telehealth_backend.integrations import npi_registry
from telehealth_backend.providers import services
from telehealth_backend.providers.models import Provider
from telehealth_backend.providers.permissions import ProviderManagePermission, ProviderPermission
from telehealth_backend.providers.serializers import (
    NpiVerificationSerializer,
    ProviderAvailabilitySerializer,
    ProviderReadSerializer,
    ProviderStatusSerializer,
    ProviderWriteSerializer,
)

logger = logging.getLogger(__name__)


class ProviderListCreateView(generics.ListCreateAPIView):
    """List providers (?status=&state=) or onboard a new one."""

    def get_permissions(self):
        if self.request.method == 'POST':
            return [ProviderManagePermission()]
        return [ProviderPermission()]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return ProviderWriteSerializer
        return ProviderReadSerializer

    def get_queryset(self):
        qs = Provider.objects.all()
        status_filter = self.request.query_params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs.order_by('last_name', 'first_name', 'id')

    def list(self, request, *args, **kwargs):
        state = request.query_params.get('state')
        if state:
            providers = services.providers_for_state(state)
            return Response(ProviderReadSerializer(providers, many=True).data)
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = ProviderWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        provider = serializer.save(
            status=Provider.STATUS_ONBOARDING,
            accepting_patients=True,
            current_queue_size=0,
            total_consultations=0,
        )
        log_action(request.user, 'provider_created', 'provider', provider.id, request=request)
        return Response(ProviderReadSerializer(provider).data, status=status.HTTP_201_CREATED)


class ProviderRetrieveUpdateView(generics.RetrieveUpdateAPIView):
    permission_classes = [ProviderPermission]
    queryset = Provider.objects.all()

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return ProviderWriteSerializer
        return ProviderReadSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        provider = self.get_object()
        serializer = ProviderWriteSerializer(provider, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        provider = serializer.save()
        log_action(
            request.user,
            'provider_updated',
            'provider',
            provider.id,
            changes={'fields': sorted(serializer.validated_data)},
            request=request,
        )
        return Response(ProviderReadSerializer(provider).data)


class ProviderAvailabilityView(APIView):
    """POST /api/providers/<id>/availability/"""

    permission_classes = [ProviderPermission]

    def post(self, request, pk, *args, **kwargs):
        provider = get_object_or_404(Provider, pk=pk)
        self.check_object_permissions(request, provider)

        serializer = ProviderAvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updates = serializer.validated_data
        for field, value in updates.items():
            setattr(provider, field, value)
        provider.save(update_fields=[*updates.keys(), 'updated_at'])

        log_action(
            request.user,
            'provider_availability_updated',
            'provider',
            provider.id,
            changes=dict(updates),
            request=request,
        )
        return Response(ProviderReadSerializer(provider).data)


class ProviderStatusView(APIView):
    """POST /api/providers/<id>/status/"""

    permission_classes = [ProviderManagePermission]

    def post(self, request, pk, *args, **kwargs):
        provider = get_object_or_404(Provider, pk=pk)
        serializer = ProviderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        old_status = provider.status
        provider.status = serializer.validated_data['status']
        provider.save(update_fields=['status', 'updated_at'])

        log_action(
            request.user,
            'provider_status_changed',
            'provider',
            provider.id,
            changes={'from': old_status, 'to': provider.status},
            request=request,
        )
        return Response(ProviderReadSerializer(provider).data)


class VerifyNpiView(APIView):
    """POST /api/providers/verify-npi/[?prescribing=1]

    Looks the NPI up in the NPPES registry. A clean result for a known
    provider stamps credential_verified_at.
    """

    permission_classes = [ProviderManagePermission]

    def post(self, request, *args, **kwargs):
        serializer = NpiVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = npi_registry.verify_npi(
            data['npi_number'],
            expected_first_name=data.get('first_name') or None,
            expected_last_name=data.get('last_name') or None,
        )
        payload = result.to_dict()

        if request.query_params.get('prescribing') in ('1', 'true'):
            payload['prescribing'] = npi_registry.check_prescribing_authority(data['npi_number'])

        provider = data.get('provider')
        if provider is None and result.verified:
            provider = Provider.objects.filter(npi_number=result.npi_number).first()

        if provider is not None and result.verified:
            provider.credential_verified_at = timezone.now()
            provider.save(update_fields=['credential_verified_at', 'updated_at'])
            payload['provider'] = provider.id

        log_action(
            request.user,
            'npi_verification',
            'provider',
            provider.id if provider is not None else result.npi_number,
            changes={'verified': result.verified, 'issues': result.issues},
            request=request,
        )
        return Response(payload, status=status.HTTP_200_OK)
