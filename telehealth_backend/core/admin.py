"""
Telehealth portal admin site and core admin classes.
"""

from django.contrib import admin
from django.contrib.admin import AdminSite
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.html import format_html
from django.utils.safestring import mark_safe

from .models import AuditLog, AuthChallenge, MagicLinkCode, Passkey, RateLimit, Role, User


class PortalAdminSite(AdminSite):
    """Admin site for portal operators."""
    site_header = "Telehealth Portal Admin"
    site_title = "Telehealth Admin"
    index_title = "Portal overview"
    site_url = None


portal_admin_site = PortalAdminSite(name='portaladmin')

ROLE_COLORS = {
    "admin": "#EA4335",
    "provider": "#1A73E8",
    "nurse": "#34A853",
    "pharmacy": "#FBBC05",
    "patient": "#9334E6",
}


def role_badge_html(role_name):
    if not role_name:
        return mark_safe('<span class="status-badge status-neutral">unverified</span>')
    return format_html(
        '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
        ROLE_COLORS.get(role_name, "#5F6368"), role_name
    )


@admin.register(Role, site=portal_admin_site)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "label", "user_count")
    search_fields = ("name", "label")
    ordering = ("name",)

    def user_count(self, obj):
        return obj.users.count()
    user_count.short_description = "Users"


@admin.register(User, site=portal_admin_site)
class UserAdmin(DjangoUserAdmin):
    """Users with role badges."""

    list_display = ("username", "email", "role_badge", "is_active", "last_login")
    list_filter = ("role", "is_staff", "is_active", "is_superuser")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("username",)
    list_per_page = 50

    fieldsets = (
        ("Authentication", {
            "fields": ("username", "password")
        }),
        ("Profile", {
            "fields": ("first_name", "last_name", "email", "phone", "role")
        }),
        ("Permissions", {
            "fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions"),
            "classes": ("collapse",)
        }),
        ("Timestamps", {
            "fields": ("last_login", "date_joined"),
            "classes": ("collapse",)
        }),
    )

    add_fieldsets = (
        ("New user", {
            "classes": ("wide",),
            "fields": ("username", "password1", "password2", "email", "role", "first_name", "last_name"),
        }),
    )

    readonly_fields = ("last_login", "date_joined")

    def lookup_allowed(self, lookup, value, request=None):
        if lookup == "role__name" or lookup.startswith("role__name__"):
            return True
        return super().lookup_allowed(lookup, value, request=request)

    def role_badge(self, obj):
        return role_badge_html(obj.role_name)
    role_badge.short_description = "Role"


@admin.register(AuditLog, site=portal_admin_site)
class AuditLogAdmin(admin.ModelAdmin):
    """Audit log (read-only)."""

    list_display = ("id", "timestamp", "actor_email", "role_badge", "action", "entity_type", "entity_id")
    list_filter = ("action", "role_name", "entity_type", "timestamp")
    search_fields = ("actor_email", "action", "entity_id")
    ordering = ("-timestamp", "-id")
    list_per_page = 100
    date_hierarchy = "timestamp"

    readonly_fields = (
        "id",
        "user",
        "actor_email",
        "role_name",
        "action",
        "entity_type",
        "entity_id",
        "changes",
        "ip_address",
        "timestamp",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return request.user.is_superuser

    def role_badge(self, obj):
        return role_badge_html(obj.role_name)
    role_badge.short_description = "Role"


@admin.register(RateLimit, site=portal_admin_site)
class RateLimitAdmin(admin.ModelAdmin):
    list_display = ("key", "count", "window_start", "window_seconds")
    search_fields = ("key",)


@admin.register(MagicLinkCode, site=portal_admin_site)
class MagicLinkCodeAdmin(admin.ModelAdmin):
    list_display = ("email", "consumed", "expires_at", "created_at")
    list_filter = ("consumed",)
    search_fields = ("email",)
    exclude = ("code",)


@admin.register(AuthChallenge, site=portal_admin_site)
class AuthChallengeAdmin(admin.ModelAdmin):
    list_display = ("type", "email", "rate_limit_key", "expires_at", "created_at")
    list_filter = ("type",)


@admin.register(Passkey, site=portal_admin_site)
class PasskeyAdmin(admin.ModelAdmin):
    list_display = ("email", "device_type", "backed_up", "login_count", "last_used_at", "created_at")
    search_fields = ("email", "credential_id")
    readonly_fields = ("credential_id", "public_key", "counter", "login_count", "last_used_at", "created_at")
