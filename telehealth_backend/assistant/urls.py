from django.urls import path

from telehealth_backend.assistant import views

app_name = 'assistant'

urlpatterns = [
    path('assistant/chat/', views.AssistantChatView.as_view(), name='chat'),
    path('assistant/conversation/', views.ConversationView.as_view(), name='conversation'),
]
