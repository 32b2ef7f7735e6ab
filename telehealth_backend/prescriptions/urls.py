"""
Prescription API routes.

GET/POST /api/prescriptions/
GET      /api/prescriptions/<id>/
POST     /api/prescriptions/<id>/{sign,send,status,fax,refills}/
GET      /api/refills/
POST     /api/refills/<id>/{approve,deny}/
GET      /api/fax-logs/
POST     /api/fax-logs/<id>/status/
"""

from django.urls import path

from telehealth_backend.prescriptions import views

app_name = 'prescriptions'

urlpatterns = [
    path('prescriptions/', views.PrescriptionListCreateView.as_view(), name='list'),
    path('prescriptions/<int:pk>/', views.PrescriptionDetailView.as_view(), name='detail'),
    path('prescriptions/<int:pk>/sign/', views.PrescriptionSignView.as_view(), name='sign'),
    path('prescriptions/<int:pk>/send/', views.PrescriptionSendView.as_view(), name='send'),
    path('prescriptions/<int:pk>/status/', views.PrescriptionStatusView.as_view(), name='status'),
    path('prescriptions/<int:pk>/fax/', views.PrescriptionFaxView.as_view(), name='fax'),
    path('prescriptions/<int:pk>/refills/', views.PrescriptionRefillCreateView.as_view(), name='refill_create'),
    path('refills/', views.RefillListView.as_view(), name='refill_list'),
    path('refills/<int:pk>/approve/', views.RefillApproveView.as_view(), name='refill_approve'),
    path('refills/<int:pk>/deny/', views.RefillDenyView.as_view(), name='refill_deny'),
    path('fax-logs/', views.FaxLogListView.as_view(), name='fax_log_list'),
    path('fax-logs/<int:pk>/status/', views.FaxLogStatusView.as_view(), name='fax_log_status'),
]
