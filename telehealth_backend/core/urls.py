"""Core App URLs - Authentication, Health and Admin tools.

Prefix: /api/
Routes:
    GET    /api/health/                        - Health check (no auth)
    POST   /api/auth/login/                    - JWT token obtain with user/role info
    POST   /api/auth/refresh/                  - JWT token refresh
    GET    /api/auth/me/                       - Current user info
    POST   /api/auth/magic-link/request/       - Email a login code
    POST   /api/auth/magic-link/verify/        - Redeem a login code
    POST   /api/auth/passkeys/challenge/       - Issue a passkey challenge
    POST   /api/auth/passkeys/register/        - Register a passkey
    POST   /api/auth/passkeys/authenticate/    - Log in with a passkey
    GET    /api/auth/passkeys/                 - Own passkeys
    DELETE /api/auth/passkeys/<id>/            - Remove a passkey
    GET    /api/admin/audit-logs/              - Audit trail
    POST   /api/admin/audit-logs/              - Manual audit entry
    GET    /api/admin/rate-limits/?key=        - Peek a rate-limit counter
    POST   /api/admin/rate-limits/reset/       - Reset a counter
"""

from django.urls import path

from telehealth_backend.core import views

app_name = 'core'

urlpatterns = [
    # Health check
    path('health/', views.health, name='health'),

    # JWT Authentication
    path('auth/login/', views.LoginView.as_view(), name='login'),
    path('auth/refresh/', views.RefreshView.as_view(), name='refresh'),
    path('auth/me/', views.MeView.as_view(), name='me'),

    # Magic link
    path('auth/magic-link/request/', views.MagicLinkRequestView.as_view(), name='magic_link_request'),
    path('auth/magic-link/verify/', views.MagicLinkVerifyView.as_view(), name='magic_link_verify'),

    # Passkeys
    path('auth/passkeys/', views.PasskeyListView.as_view(), name='passkey_list'),
    path('auth/passkeys/challenge/', views.PasskeyChallengeView.as_view(), name='passkey_challenge'),
    path('auth/passkeys/register/', views.PasskeyRegisterView.as_view(), name='passkey_register'),
    path('auth/passkeys/authenticate/', views.PasskeyAuthenticateView.as_view(), name='passkey_authenticate'),
    path('auth/passkeys/<int:pk>/', views.PasskeyDeleteView.as_view(), name='passkey_delete'),

    # Admin tools
    path('admin/audit-logs/', views.AuditLogListCreateView.as_view(), name='audit_logs'),
    path('admin/rate-limits/', views.RateLimitStatusView.as_view(), name='rate_limit_status'),
    path('admin/rate-limits/reset/', views.RateLimitResetView.as_view(), name='rate_limit_reset'),
]
