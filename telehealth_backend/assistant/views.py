from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from telehealth_backend.assistant import services
from telehealth_backend.assistant.models import Conversation
from telehealth_backend.assistant.permissions import AssistantPermission
from telehealth_backend.assistant.serializers import ChatRequestSerializer, ConversationSerializer
from telehealth_backend.core import capabilities
from telehealth_backend.core.exceptions import IntegrationNotConfigured, PortalError, error_response
from telehealth_backend.core.ratelimit import RateLimitMixin
from telehealth_backend.core.utils import log_action
from telehealth_backend.integrations import llm


class AssistantChatView(RateLimitMixin, APIView):
    """POST /api/assistant/chat/ body {message, page?, intake?}"""

    permission_classes = [AssistantPermission]
    rate_limit_scope = 'assistant_chat'
    rate_limit_max_requests = 20
    rate_limit_window_seconds = 60

    def post(self, request, *args, **kwargs):
        serializer = ChatRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if not llm.is_configured():
            return error_response(IntegrationNotConfigured(llm.SERVICE, 'AI assistant is not configured'))

        intake = data.get('intake')
        if intake is not None and not capabilities.has_cap(request.user, capabilities.INTAKE_REVIEW):
            if intake.email != (request.user.email or '').lower():
                intake = None

        try:
            conversation, reply = services.chat(request.user, data['message'], page=data['page'], intake=intake)
        except PortalError as e:
            return error_response(e)

        log_action(
            request.user,
            'assistant_message',
            'conversation',
            conversation.id,
            changes={'page': data['page'], 'model': conversation.model},
            request=request,
        )
        return Response({'reply': reply, 'conversation': conversation.id, 'model': conversation.model})


class ConversationView(APIView):
    """GET /api/assistant/conversation/ - current conversation; DELETE starts over."""

    permission_classes = [AssistantPermission]

    def get(self, request, *args, **kwargs):
        conversation = Conversation.objects.filter(user=request.user).order_by('-updated_at', '-id').first()
        if conversation is None:
            return Response({'messages': []})
        return Response(ConversationSerializer(conversation).data)

    def delete(self, request, *args, **kwargs):
        deleted, _ = Conversation.objects.filter(user=request.user).delete()
        log_action(request.user, 'conversation_cleared', 'conversation', changes={'deleted': deleted}, request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)
