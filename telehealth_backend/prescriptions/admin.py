from django.contrib import admin
from django.utils.html import format_html

from telehealth_backend.core.admin import portal_admin_site
from telehealth_backend.prescriptions.models import FaxLog, Prescription, RefillRequest


class RefillRequestInline(admin.TabularInline):
    model = RefillRequest
    extra = 0
    fields = ("status", "requested_at", "processed_at", "processed_by", "denial_reason")
    readonly_fields = ("requested_at",)
    raw_id_fields = ("processed_by",)


@admin.register(Prescription, site=portal_admin_site)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ("id", "medication_name", "dosage", "patient", "provider", "pharmacy", "status_badge", "refills_display", "created_at")
    list_filter = ("status", "prior_auth_required", "dea_schedule")
    search_fields = ("medication_name", "generic_name", "ndc", "patient__email", "provider__last_name")
    raw_id_fields = ("consultation", "patient", "provider", "pharmacy")
    readonly_fields = ("sent_to_pharmacy_at", "filled_at", "created_at", "updated_at")
    date_hierarchy = "created_at"
    inlines = [RefillRequestInline]

    fieldsets = (
        ("Parties", {"fields": ("consultation", "patient", "provider", "pharmacy")}),
        ("Medication", {
            "fields": (
                "medication_name",
                "generic_name",
                "ndc",
                "dosage",
                "form",
                "quantity",
                "days_supply",
                "directions",
                "dea_schedule",
            )
        }),
        ("Refills", {"fields": ("refills_authorized", "refills_used", "next_refill_date")}),
        ("Workflow", {
            "fields": (
                "status",
                "e_prescribe_id",
                "sent_to_pharmacy_at",
                "filled_at",
                "expires_at",
                "prior_auth_required",
                "prior_auth_status",
            )
        }),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def status_badge(self, obj):
        colors = {
            Prescription.STATUS_DRAFT: "#9AA0A6",
            Prescription.STATUS_PENDING_REVIEW: "#FBBC05",
            Prescription.STATUS_SIGNED: "#4285F4",
            Prescription.STATUS_SENT: "#A142F4",
            Prescription.STATUS_FILLING: "#FBBC05",
            Prescription.STATUS_READY: "#34A853",
            Prescription.STATUS_PICKED_UP: "#5F6368",
            Prescription.STATUS_DELIVERED: "#5F6368",
            Prescription.STATUS_CANCELLED: "#EA4335",
        }
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
            colors.get(obj.status, "#5F6368"), obj.get_status_display()
        )
    status_badge.short_description = "Status"

    def refills_display(self, obj):
        return f"{obj.refills_used}/{obj.refills_authorized}"
    refills_display.short_description = "Refills"


@admin.register(RefillRequest, site=portal_admin_site)
class RefillRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "prescription", "patient", "status", "requested_at", "processed_at")
    list_filter = ("status",)
    raw_id_fields = ("prescription", "patient", "pharmacy", "processed_by")
    readonly_fields = ("requested_at",)


@admin.register(FaxLog, site=portal_admin_site)
class FaxLogAdmin(admin.ModelAdmin):
    list_display = ("id", "prescription", "pharmacy", "fax_number", "status", "attempts", "created_at")
    list_filter = ("status",)
    search_fields = ("fax_number", "provider_fax_id")
    raw_id_fields = ("prescription", "pharmacy")
    readonly_fields = ("created_at", "sent_at", "confirmed_at")
