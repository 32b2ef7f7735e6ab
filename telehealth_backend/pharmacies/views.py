from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from telehealth_backend.core.exceptions import IntegrationError, error_response
from telehealth_backend.core.utils import log_action
from telehealth_backend.integrations import npi_registry
from telehealth_backend.pharmacies.models import Pharmacy
from telehealth_backend.pharmacies.permissions import PharmacyPermission
from telehealth_backend.pharmacies.serializers import (
    PharmacyReadSerializer,
    PharmacySearchSerializer,
    PharmacyWriteSerializer,
)


class PharmacyListCreateView(generics.ListCreateAPIView):
    """List pharmacies (?status=&state=&tier=) or create one."""

    permission_classes = [PharmacyPermission]

    def get_queryset(self):
        qs = Pharmacy.objects.all()
        params = self.request.query_params
        if params.get('status'):
            qs = qs.filter(status=params['status'])
        if params.get('state'):
            qs = qs.filter(state=params['state'].upper())
        if params.get('tier'):
            try:
                qs = qs.filter(tier=int(params['tier']))
            except ValueError:
                qs = qs.none()
        return qs.order_by('name', 'id')

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return PharmacyWriteSerializer
        return PharmacyReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = PharmacyWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        pharmacy = serializer.save()
        log_action(request.user, 'pharmacy_created', 'pharmacy', pharmacy.id, request=request)
        return Response(PharmacyReadSerializer(pharmacy).data, status=status.HTTP_201_CREATED)


class PharmacyRetrieveUpdateView(generics.RetrieveUpdateAPIView):
    permission_classes = [PharmacyPermission]
    queryset = Pharmacy.objects.all()

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return PharmacyWriteSerializer
        return PharmacyReadSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = PharmacyWriteSerializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        pharmacy = serializer.save()
        log_action(
            request.user,
            'pharmacy_updated',
            'pharmacy',
            pharmacy.id,
            changes={'fields': sorted(serializer.validated_data)},
            request=request,
        )
        return Response(PharmacyReadSerializer(pharmacy).data)


class PharmacySearchView(APIView):
    """GET /api/pharmacies/search/?name=&city=&state=&zip= (NPI Registry)."""

    permission_classes = [PharmacyPermission]

    def get(self, request, *args, **kwargs):
        serializer = PharmacySearchSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            results = npi_registry.search_pharmacies(
                name=data.get('name') or None,
                city=data.get('city') or None,
                state=(data.get('state') or '').upper() or None,
                zip_code=data.get('zip') or None,
            )
        except IntegrationError as e:
            return error_response(e)
        return Response({'results': results, 'count': len(results)})
