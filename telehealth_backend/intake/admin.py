from django.contrib import admin

from telehealth_backend.core.admin import portal_admin_site
from telehealth_backend.intake.models import Intake


@admin.register(Intake, site=portal_admin_site)
class IntakeAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "status", "severity_level", "consent_given", "id_verified", "created_at")
    list_filter = ("status", "consent_given", "id_verified")
    search_fields = ("email", "chief_complaint")
    raw_id_fields = ("patient",)
    readonly_fields = ("completed_steps", "triage_result", "created_at", "updated_at")
    date_hierarchy = "created_at"

    fieldsets = (
        ("Intake", {"fields": ("patient", "email", "status", "completed_steps")}),
        ("Clinical", {
            "fields": (
                "chief_complaint",
                "symptom_duration",
                "severity_level",
                "current_symptoms",
                "medical_history",
                "medications",
                "allergies",
                "vital_signs",
            )
        }),
        ("Verification", {"fields": ("id_verified", "consent_given", "triage_result")}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )
