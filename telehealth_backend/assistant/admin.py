from django.contrib import admin

from telehealth_backend.assistant.models import Conversation
from telehealth_backend.core.admin import portal_admin_site


@admin.register(Conversation, site=portal_admin_site)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "user_role", "model", "message_count", "updated_at")
    list_filter = ("user_role", "model")
    search_fields = ("email",)
    raw_id_fields = ("user", "intake")
    readonly_fields = ("messages", "created_at", "updated_at")

    def message_count(self, obj):
        return len(obj.messages or [])
    message_count.short_description = "Messages"
