from django.urls import path

from telehealth_backend.pharmacies.views import (
    PharmacyListCreateView,
    PharmacyRetrieveUpdateView,
    PharmacySearchView,
)

app_name = 'pharmacies'

urlpatterns = [
    path('pharmacies/', PharmacyListCreateView.as_view(), name='list'),
    path('pharmacies/search/', PharmacySearchView.as_view(), name='search'),
    path('pharmacies/<int:pk>/', PharmacyRetrieveUpdateView.as_view(), name='detail'),
]
