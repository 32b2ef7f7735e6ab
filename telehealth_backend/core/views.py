"""Core app views.

Contains:
- health: Health check endpoint
- LoginView / RefreshView / MeView: JWT authentication
- MagicLinkRequestView / MagicLinkVerifyView: email code login
- Passkey*View: challenge issuing, registration, authentication, management
- AuditLogListCreateView: admin audit trail
- RateLimitStatusView / RateLimitResetView: counter inspection
"""

import logging

from django.db import connection
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone

from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from rest_framework_simplejwt.tokens import RefreshToken

from telehealth_backend.core import magic_links, passkeys, ratelimit
from telehealth_backend.core.accounts import get_or_create_member, issue_tokens
from telehealth_backend.core.exceptions import IntegrationError, PortalError, error_response
from telehealth_backend.core.models import AuditLog, Passkey
from telehealth_backend.core.permissions import AuditLogPermission, RateLimitAdminPermission
from telehealth_backend.core.serializers import (
    AuditLogCreateSerializer,
    AuditLogSerializer,
    LoginSerializer,
    MagicLinkRequestSerializer,
    MagicLinkVerifySerializer,
    PasskeyAuthenticateSerializer,
    PasskeyChallengeSerializer,
    PasskeyRegisterSerializer,
    PasskeySerializer,
    RateLimitResetSerializer,
    RefreshSerializer,
    UserMeSerializer,
)
from telehealth_backend.core.utils import log_action
from telehealth_backend.integrations import emailit
from telehealth_backend.notifications import services as notification_services
from telehealth_backend.notifications.models import Notification

logger = logging.getLogger(__name__)

AUDIT_LOG_DEFAULT_LIMIT = 50


def health(request):
    """Health check endpoint - no authentication required."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1;')
    except Exception as exc:
        return JsonResponse({'status': 'error', 'detail': str(exc)}, status=503)

    return JsonResponse({'status': 'ok'})


class LoginView(APIView):
    """Obtain JWT access and refresh tokens.

    POST /api/auth/login/
    Body: {"username": "...", "password": "..."}
    Returns: {"user": {...}, "access": "...", "refresh": "..."}
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']
        return Response(issue_tokens(user), status=status.HTTP_200_OK)


class RefreshView(APIView):
    """Refresh JWT access token.

    POST /api/auth/refresh/
    Body: {"refresh": "..."}
    Returns: {"access": "..."}
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        refresh = RefreshToken(serializer.validated_data['refresh'])
        return Response({'access': str(refresh.access_token)}, status=status.HTTP_200_OK)


class MeView(APIView):
    """GET /api/auth/me/ - current user with role and capabilities."""

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return Response(UserMeSerializer(request.user).data, status=status.HTTP_200_OK)


# -----------------------------------------------------------------------------
# Magic link
# -----------------------------------------------------------------------------


def _code_email(code):
    minutes = magic_links.code_lifetime_minutes()
    subject = f'{code} is your verification code'
    text = (
        f'Your verification code is: {code}\n\n'
        f"This code expires in {minutes} minutes. If you didn't request this, you can safely ignore this email."
    )
    return subject, text


class MagicLinkRequestView(APIView):
    """Send a six-digit login code.

    POST /api/auth/magic-link/request/
    Body: {"email": "..."}
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = MagicLinkRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email']

        member, _ = get_or_create_member(email)

        try:
            record = magic_links.issue_code(email)
        except PortalError as e:
            return error_response(e)

        subject, text = _code_email(record.code)
        error = None
        try:
            emailit.send_email(email, subject, text)
        except IntegrationError as e:
            logger.error('Magic-link email to %s failed: %s', email, e.message)
            error = 'Email delivery failed'

        notification_services.create_notification(
            recipient_email=email,
            type='magic_link',
            subject=subject,
            body='Verification code sent',
            status=Notification.STATUS_FAILED if error else Notification.STATUS_SENT,
            sent_at=None if error else timezone.now(),
            metadata={'error': error} if error else None,
        )

        log_action(member, 'magic_link_requested', 'user', member.id, changes={'delivered': not error}, request=request)

        if error:
            return Response({'success': False, 'error': error}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({'success': True}, status=status.HTTP_200_OK)


class MagicLinkVerifyView(APIView):
    """Redeem a login code for a JWT pair.

    POST /api/auth/magic-link/verify/
    Body: {"email": "...", "code": "123456"}
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = MagicLinkVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email']

        try:
            valid = magic_links.verify_code(email, serializer.validated_data['code'])
        except PortalError as e:
            return error_response(e)

        if not valid:
            return Response(
                {'success': False, 'error': 'Invalid or expired code'},
                status=status.HTTP_400_BAD_REQUEST,
            )

        user, _ = get_or_create_member(email)
        log_action(user, 'magic_link_login', 'user', user.id, request=request)
        return Response({'success': True, **issue_tokens(user)}, status=status.HTTP_200_OK)


# -----------------------------------------------------------------------------
# Passkeys
# -----------------------------------------------------------------------------


class PasskeyChallengeView(APIView):
    """POST /api/auth/passkeys/challenge/ - issue a registration or login challenge."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = PasskeyChallengeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            challenge = passkeys.create_challenge(
                type=data['type'],
                email=data.get('email'),
                fingerprint=data.get('client_fingerprint'),
            )
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'passkey_challenge_issued',
            'auth_challenge',
            challenge.id,
            changes={'type': challenge.type},
            request=request,
        )

        return Response(
            {
                'challenge': challenge.challenge,
                'type': challenge.type,
                'expires_at': challenge.expires_at.isoformat(),
            },
            status=status.HTTP_201_CREATED,
        )


class PasskeyRegisterView(APIView):
    """POST /api/auth/passkeys/register/ - store a credential for the current user."""

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PasskeyRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            passkey = passkeys.register_credential(request.user, **serializer.validated_data)
        except PortalError as e:
            return error_response(e)

        log_action(request.user, 'passkey_registered', 'passkey', passkey.id, request=request)
        return Response(PasskeySerializer(passkey).data, status=status.HTTP_201_CREATED)


class PasskeyAuthenticateView(APIView):
    """POST /api/auth/passkeys/authenticate/ - exchange a signed challenge for tokens."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = PasskeyAuthenticateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            passkey = passkeys.authenticate(**serializer.validated_data)
        except PortalError as e:
            return error_response(e)

        user = passkey.user
        if user is None:
            user, _ = get_or_create_member(passkey.email)
        if not user.is_active:
            return Response({'detail': 'User account is disabled.'}, status=status.HTTP_403_FORBIDDEN)

        log_action(user, 'passkey_login', 'passkey', passkey.id, request=request)
        return Response(issue_tokens(user), status=status.HTTP_200_OK)


class PasskeyListView(generics.ListAPIView):
    """GET /api/auth/passkeys/ - own credentials."""

    permission_classes = [IsAuthenticated]
    serializer_class = PasskeySerializer

    def get_queryset(self):
        return Passkey.objects.filter(user=self.request.user).order_by('-created_at', '-id')


class PasskeyDeleteView(APIView):
    """DELETE /api/auth/passkeys/<id>/ - remove an own credential."""

    permission_classes = [IsAuthenticated]

    def delete(self, request, pk, *args, **kwargs):
        passkey = get_object_or_404(Passkey, pk=pk, user=request.user)
        passkey_id = passkey.id
        passkey.delete()
        log_action(request.user, 'passkey_deleted', 'passkey', passkey_id, request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)


# -----------------------------------------------------------------------------
# Admin: audit log and rate limits
# -----------------------------------------------------------------------------


class AuditLogListCreateView(generics.ListCreateAPIView):
    """Admin audit trail.

    GET  /api/admin/audit-logs/?actor_email=&entity_type=&entity_id=&action=&limit=
    POST /api/admin/audit-logs/
    """

    permission_classes = [AuditLogPermission]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return AuditLogCreateSerializer
        return AuditLogSerializer

    def get_queryset(self):
        params = self.request.query_params
        qs = AuditLog.objects.all()

        if params.get('actor_email'):
            qs = qs.filter(actor_email=params['actor_email'].strip().lower())
        if params.get('entity_type'):
            qs = qs.filter(entity_type=params['entity_type'])
            if params.get('entity_id'):
                qs = qs.filter(entity_id=params['entity_id'])
        if params.get('action'):
            qs = qs.filter(action=params['action'])

        try:
            limit = int(params.get('limit', AUDIT_LOG_DEFAULT_LIMIT))
        except ValueError:
            limit = AUDIT_LOG_DEFAULT_LIMIT
        limit = max(1, min(limit, 500))

        return qs.order_by('-timestamp', '-id')[:limit]

    def create(self, request, *args, **kwargs):
        serializer = AuditLogCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        entry = log_action(
            request.user,
            data['action'],
            data['entity_type'],
            data.get('entity_id') or None,
            changes=data.get('changes'),
            request=request,
        )
        if entry is None:
            return Response({'detail': 'Audit entry could not be written.'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(AuditLogSerializer(entry).data, status=status.HTTP_201_CREATED)


class RateLimitStatusView(APIView):
    """GET /api/admin/rate-limits/?key=&max= - inspect a counter without counting."""

    permission_classes = [RateLimitAdminPermission]

    def get(self, request, *args, **kwargs):
        key = request.query_params.get('key')
        if not key:
            return Response({'detail': 'key is required.'}, status=status.HTTP_400_BAD_REQUEST)
        try:
            max_requests = int(request.query_params['max']) if request.query_params.get('max') else None
        except ValueError:
            return Response({'detail': 'max must be an integer.'}, status=status.HTTP_400_BAD_REQUEST)

        result = ratelimit.peek(key, max_requests=max_requests)
        return Response({'key': key, **result.to_dict()})


class RateLimitResetView(APIView):
    """POST /api/admin/rate-limits/reset/ - drop a counter."""

    permission_classes = [RateLimitAdminPermission]

    def post(self, request, *args, **kwargs):
        serializer = RateLimitResetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        key = serializer.validated_data['key']
        existed = ratelimit.reset(key)
        log_action(request.user, 'rate_limit_reset', 'rate_limit', key, request=request)
        return Response({'key': key, 'reset': existed})
