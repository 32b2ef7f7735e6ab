from rest_framework import serializers

from telehealth_backend.assistant.models import Conversation
from telehealth_backend.intake.models import Intake


class ChatRequestSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=4000)
    page = serializers.CharField(required=False, allow_blank=True, default='')
    intake = serializers.PrimaryKeyRelatedField(queryset=Intake.objects.all(), required=False, allow_null=True)


class ConversationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Conversation
        fields = ['id', 'email', 'messages', 'current_page', 'intake', 'user_role', 'model', 'created_at', 'updated_at']
        read_only_fields = fields
