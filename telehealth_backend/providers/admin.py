from django.contrib import admin
from django.utils.html import format_html

from telehealth_backend.core.admin import portal_admin_site
from telehealth_backend.providers.models import Provider


@admin.register(Provider, site=portal_admin_site)
class ProviderAdmin(admin.ModelAdmin):
    list_display = ("id", "display_name", "npi_number", "status_badge", "accepting_patients", "current_queue_size", "total_consultations")
    list_filter = ("status", "title", "accepting_patients")
    search_fields = ("first_name", "last_name", "email", "npi_number")
    ordering = ("last_name", "first_name")
    raw_id_fields = ("user",)
    readonly_fields = ("current_queue_size", "total_consultations", "credential_verified_at", "created_at", "updated_at")

    def status_badge(self, obj):
        colors = {
            Provider.STATUS_ONBOARDING: "#FBBC05",
            Provider.STATUS_ACTIVE: "#34A853",
            Provider.STATUS_INACTIVE: "#9AA0A6",
            Provider.STATUS_SUSPENDED: "#EA4335",
        }
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
            colors.get(obj.status, "#5F6368"), obj.get_status_display()
        )
    status_badge.short_description = "Status"
