from django.contrib import admin
from django.utils.html import format_html

from telehealth_backend.core.admin import portal_admin_site
from telehealth_backend.notifications.models import Notification

STATUS_COLORS = {
    Notification.STATUS_PENDING: "#5F6368",
    Notification.STATUS_SENT: "#1A73E8",
    Notification.STATUS_DELIVERED: "#34A853",
    Notification.STATUS_FAILED: "#EA4335",
    Notification.STATUS_READ: "#9AA0A6",
}


@admin.register(Notification, site=portal_admin_site)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "recipient_email", "type", "channel", "status_badge", "sent_at", "read_at", "created_at")
    list_filter = ("status", "channel", "type")
    search_fields = ("recipient_email", "subject")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-created_at",)

    def status_badge(self, obj):
        return format_html(
            '<span class="status-badge" style="background-color: {}; color: white;">{}</span>',
            STATUS_COLORS.get(obj.status, "#5F6368"), obj.get_status_display()
        )
    status_badge.short_description = "Status"
