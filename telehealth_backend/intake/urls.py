"""
Intake API routes.

GET/POST /api/intakes/
GET      /api/intakes/latest/
GET      /api/intakes/<id>/
POST     /api/intakes/<id>/steps/
POST     /api/intakes/<id>/complete/
POST     /api/intakes/<id>/triage/
"""

from django.urls import path

from telehealth_backend.intake import views

app_name = 'intake'

urlpatterns = [
    path('intakes/', views.IntakeListCreateView.as_view(), name='list'),
    path('intakes/latest/', views.IntakeLatestView.as_view(), name='latest'),
    path('intakes/<int:pk>/', views.IntakeDetailView.as_view(), name='detail'),
    path('intakes/<int:pk>/steps/', views.IntakeStepView.as_view(), name='steps'),
    path('intakes/<int:pk>/complete/', views.IntakeCompleteView.as_view(), name='complete'),
    path('intakes/<int:pk>/triage/', views.IntakeTriageView.as_view(), name='triage'),
]
