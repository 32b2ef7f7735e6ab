from rest_framework.permissions import SAFE_METHODS

from telehealth_backend.core import capabilities
from telehealth_backend.core.permissions import CapabilityPermission, HasCapability


class ProviderPermission(CapabilityPermission):
    """Provider directory.

    - read: every role
    - write: provider:manage (providers edit their own record via object checks)
    """

    read_caps = {capabilities.VIEW_DASHBOARD}
    write_caps = {capabilities.PROVIDER_MANAGE, capabilities.WORKFLOW_MANAGE}

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        if capabilities.has_cap(request.user, capabilities.PROVIDER_MANAGE):
            return True
        return obj.user_id == request.user.id


class ProviderManagePermission(HasCapability):
    required_caps = {capabilities.PROVIDER_MANAGE}
