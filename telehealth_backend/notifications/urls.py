"""Notification URLs.

Prefix: /api/
Routes:
    GET/POST /api/notifications/
    GET      /api/notifications/unread-count/
    POST     /api/notifications/read-all/
    POST     /api/notifications/<id>/read/
    POST     /api/notifications/<id>/sent/
    POST     /api/notifications/<id>/failed/
"""

from django.urls import path

from telehealth_backend.notifications import views

app_name = 'notifications'

urlpatterns = [
    path('notifications/', views.NotificationListCreateView.as_view(), name='list'),
    path('notifications/unread-count/', views.UnreadCountView.as_view(), name='unread_count'),
    path('notifications/read-all/', views.NotificationMarkAllReadView.as_view(), name='read_all'),
    path('notifications/<int:pk>/read/', views.NotificationMarkReadView.as_view(), name='read'),
    path('notifications/<int:pk>/sent/', views.NotificationMarkSentView.as_view(), name='sent'),
    path('notifications/<int:pk>/failed/', views.NotificationMarkFailedView.as_view(), name='failed'),
]
