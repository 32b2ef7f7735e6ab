from django.urls import path

from telehealth_backend.providers import views

app_name = 'providers'

urlpatterns = [
    path('providers/', views.ProviderListCreateView.as_view(), name='list'),
    path('providers/verify-npi/', views.VerifyNpiView.as_view(), name='verify_npi'),
    path('providers/<int:pk>/', views.ProviderRetrieveUpdateView.as_view(), name='detail'),
    path('providers/<int:pk>/availability/', views.ProviderAvailabilityView.as_view(), name='availability'),
    path('providers/<int:pk>/status/', views.ProviderStatusView.as_view(), name='status'),
]
