"""Core permissions for capability-based access control.

This module provides the base permission class used by every app. Views
declare which capabilities allow reading and which allow writing:

    class PrescriptionPermission(CapabilityPermission):
        read_caps = {capabilities.RX_VIEW}
        write_caps = {capabilities.RX_WRITE}

A request passes when the caller holds ANY of the listed capabilities.
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS

from telehealth_backend.core import capabilities


class CapabilityPermission(BasePermission):
    """Base class for capability permissions with read_caps/write_caps pattern."""

    read_caps: set = set()
    write_caps: set = set()

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False

        if request.method in SAFE_METHODS:
            return capabilities.has_any_cap(user, self.read_caps)

        return capabilities.has_any_cap(user, self.write_caps)

    def has_object_permission(self, request, view, obj):
        # Record-level scoping happens in get_queryset of each view.
        return True


class HasCapability(CapabilityPermission):
    """Same capabilities for every method; set ``required_caps`` in subclasses."""

    required_caps: set = set()

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return capabilities.has_any_cap(user, self.required_caps)


class AuditLogPermission(HasCapability):
    """Audit log is visible to holders of audit:view (admins)."""

    required_caps = {capabilities.AUDIT_VIEW}


class RateLimitAdminPermission(HasCapability):
    """Inspecting and resetting rate-limit counters."""

    required_caps = {capabilities.SETTINGS_MANAGE}

