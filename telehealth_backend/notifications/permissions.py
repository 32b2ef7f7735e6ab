from telehealth_backend.core import capabilities
from telehealth_backend.core.permissions import CapabilityPermission


class NotificationPermission(CapabilityPermission):
    """Any signed-in user with a role reads their own notifications.

    Creating notifications is reserved for workflow managers and admins.
    """

    read_caps = {capabilities.VIEW_DASHBOARD}
    write_caps = {capabilities.SETTINGS_MANAGE, capabilities.WORKFLOW_MANAGE}


class NotificationInboxPermission(CapabilityPermission):
    """Marking one's own notifications read (any role)."""

    read_caps = {capabilities.VIEW_DASHBOARD}
    write_caps = {capabilities.VIEW_DASHBOARD}


class NotificationDeliveryPermission(CapabilityPermission):
    """Recording delivery outcomes (sent/failed)."""

    read_caps = {capabilities.SETTINGS_MANAGE, capabilities.WORKFLOW_MANAGE}
    write_caps = {capabilities.SETTINGS_MANAGE, capabilities.WORKFLOW_MANAGE}
