from django.contrib import admin

from telehealth_backend.core.admin import portal_admin_site
from telehealth_backend.pharmacies.models import Pharmacy


@admin.register(Pharmacy, site=portal_admin_site)
class PharmacyAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "city", "state", "type", "tier", "accepts_e_prescribe", "status")
    list_filter = ("status", "type", "tier", "state")
    search_fields = ("name", "npi_number", "ncpdp_id", "city")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")

    fieldsets = (
        ("Pharmacy", {
            "fields": ("name", "type", "status", "tier", "accepts_e_prescribe", "capabilities")
        }),
        ("Identifiers", {
            "fields": ("npi_number", "ncpdp_id")
        }),
        ("Contact", {
            "fields": ("street", "city", "state", "zip_code", "phone", "fax", "email")
        }),
        ("System", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )
