"""
Consultation API routes.

GET/POST /api/consultations/
POST     /api/consultations/from-intake/
POST     /api/consultations/enqueue/
GET      /api/consultations/queue/
GET      /api/consultations/active/
GET      /api/consultations/<id>/
POST     /api/consultations/<id>/{schedule,start,complete,cancel,no-show,claim,room}/
"""

from django.urls import path

from telehealth_backend.consultations import views

app_name = 'consultations'

urlpatterns = [
    path('consultations/', views.ConsultationListCreateView.as_view(), name='list'),
    path('consultations/from-intake/', views.ConsultationFromIntakeView.as_view(), name='from_intake'),
    path('consultations/enqueue/', views.ConsultationEnqueueView.as_view(), name='enqueue'),
    path('consultations/queue/', views.WaitingQueueView.as_view(), name='queue'),
    path('consultations/active/', views.ActiveConsultationView.as_view(), name='active'),
    path('consultations/<int:pk>/', views.ConsultationDetailView.as_view(), name='detail'),
    path('consultations/<int:pk>/schedule/', views.ConsultationScheduleView.as_view(), name='schedule'),
    path('consultations/<int:pk>/start/', views.ConsultationStartView.as_view(), name='start'),
    path('consultations/<int:pk>/complete/', views.ConsultationCompleteView.as_view(), name='complete'),
    path('consultations/<int:pk>/cancel/', views.ConsultationCancelView.as_view(), name='cancel'),
    path('consultations/<int:pk>/no-show/', views.ConsultationNoShowView.as_view(), name='no_show'),
    path('consultations/<int:pk>/claim/', views.ConsultationClaimView.as_view(), name='claim'),
    path('consultations/<int:pk>/room/', views.ConsultationRoomView.as_view(), name='room'),
]
