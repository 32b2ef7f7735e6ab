"""
Patients App - Admin
"""

from django.contrib import admin
from django.utils.html import format_html

from telehealth_backend.core.admin import portal_admin_site
from telehealth_backend.patients.models import Patient


@admin.register(Patient, site=portal_admin_site)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "display_name", "state", "id_badge", "consent_signed_at", "created_at")
    list_filter = ("id_verification_status", "state", "created_at")
    search_fields = ("email", "user__first_name", "user__last_name")
    ordering = ("-created_at",)
    list_per_page = 50
    raw_id_fields = ("user", "primary_pharmacy")
    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        ("Patient", {
            "fields": ("user", "email", "date_of_birth", "gender")
        }),
        ("Address", {
            "fields": ("street", "city", "state", "zip_code")
        }),
        ("Insurance", {
            "fields": ("insurance_provider", "insurance_policy_number", "insurance_group_number")
        }),
        ("Clinical", {
            "fields": ("allergies", "current_medications", "medical_conditions", "emergency_contact", "primary_pharmacy")
        }),
        ("Verification", {
            "fields": ("consent_signed_at", "id_verification_status", "id_verified_at")
        }),
        ("System", {
            "fields": ("id", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )

    def id_badge(self, obj):
        colors = {
            Patient.ID_PENDING: "#FBBC05",
            Patient.ID_VERIFIED: "#34A853",
            Patient.ID_REJECTED: "#EA4335",
        }
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
            colors.get(obj.id_verification_status, "#5F6368"), obj.get_id_verification_status_display()
        )
    id_badge.short_description = "ID check"
