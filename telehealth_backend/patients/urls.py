from django.urls import path

from telehealth_backend.patients import views

app_name = 'patients'

urlpatterns = [
    path('patients/', views.PatientListCreateView.as_view(), name='list'),
    path('patients/me/', views.PatientMeView.as_view(), name='me'),
    path('patients/<int:pk>/', views.PatientRetrieveUpdateView.as_view(), name='detail'),
    path('patients/<int:pk>/consent/', views.PatientConsentView.as_view(), name='consent'),
    path('patients/<int:pk>/verify-id/', views.PatientIdVerificationView.as_view(), name='verify_id'),
]
