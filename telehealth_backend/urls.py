"""Telehealth portal URL configuration.

API routes (all under /api/):
    health/, auth/, admin/          - core
    pharmacies/                     - pharmacies
    patients/                       - patients
    providers/                      - providers
    intakes/                        - intake
    consultations/                  - consultations
    prescriptions/, refills/, fax-logs/ - prescriptions
    notifications/                  - notifications
    assistant/                      - assistant
"""

from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path

from telehealth_backend.core.admin import portal_admin_site


def root(request):
    return HttpResponse("Telehealth backend is running.")


urlpatterns = [
    path("", root, name="root"),
    path("admin/", admin.site.urls),
    path("portaladmin/", portal_admin_site.urls),

    path("api/", include("telehealth_backend.core.urls")),
    path("api/", include("telehealth_backend.pharmacies.urls")),
    path("api/", include("telehealth_backend.patients.urls")),
    path("api/", include("telehealth_backend.providers.urls")),
    path("api/", include("telehealth_backend.intake.urls")),
    path("api/", include("telehealth_backend.consultations.urls")),
    path("api/", include("telehealth_backend.prescriptions.urls")),
    path("api/", include("telehealth_backend.notifications.urls")),
    path("api/", include("telehealth_backend.assistant.urls")),
]
