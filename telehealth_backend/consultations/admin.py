from django.contrib import admin
from django.utils.html import format_html

from telehealth_backend.consultations.models import Consultation
from telehealth_backend.core.admin import portal_admin_site


@admin.register(Consultation, site=portal_admin_site)
class ConsultationAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "provider", "type", "status_badge", "scheduled_at", "duration_minutes", "cost_display")
    list_filter = ("status", "type", "payment_status", "patient_state")
    search_fields = ("patient__email", "provider__last_name", "diagnosis", "chief_complaint")
    raw_id_fields = ("patient", "provider", "intake")
    readonly_fields = ("started_at", "ended_at", "duration_minutes", "created_at", "updated_at")
    date_hierarchy = "created_at"

    fieldsets = (
        ("Visit", {"fields": ("patient", "provider", "intake", "type", "status", "patient_state")}),
        ("Timing", {"fields": ("scheduled_at", "started_at", "ended_at", "duration_minutes")}),
        ("Room", {"fields": ("room_url", "room_token", "recording"), "classes": ("collapse",)}),
        ("Clinical", {
            "fields": (
                "chief_complaint",
                "notes",
                "diagnosis",
                "diagnosis_codes",
                "treatment_plan",
                "follow_up_required",
                "follow_up_date",
            )
        }),
        ("Billing", {"fields": ("cost", "payment_status")}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def status_badge(self, obj):
        colors = {
            Consultation.STATUS_SCHEDULED: "#4285F4",
            Consultation.STATUS_WAITING: "#FBBC05",
            Consultation.STATUS_ASSIGNED: "#A142F4",
            Consultation.STATUS_IN_PROGRESS: "#34A853",
            Consultation.STATUS_COMPLETED: "#5F6368",
            Consultation.STATUS_CANCELLED: "#EA4335",
            Consultation.STATUS_NO_SHOW: "#EA4335",
        }
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
            colors.get(obj.status, "#5F6368"), obj.get_status_display()
        )
    status_badge.short_description = "Status"

    def cost_display(self, obj):
        return f"${obj.cost / 100:.2f}"
    cost_display.short_description = "Cost"
