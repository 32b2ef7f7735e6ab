from django.conf import settings
from django.db import models


class Conversation(models.Model):
    """Running chat history between a user and the assistant.

    messages is a list of {role, content, page, timestamp} dicts, oldest first.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='assistant_conversations',
    )
    email = models.EmailField(db_index=True)
    messages = models.JSONField(default=list, blank=True)
    current_page = models.CharField(max_length=255, blank=True, default='')
    intake = models.ForeignKey(
        'intake.Intake',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assistant_conversations',
    )
    user_role = models.CharField(max_length=50, blank=True, default='')
    model = models.CharField(max_length=128, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'assistant_conversation'
        ordering = ['-updated_at', '-id']

    def __str__(self) -> str:
        return f"Conversation #{self.pk} ({self.email})"
