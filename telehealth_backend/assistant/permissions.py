from telehealth_backend.core import capabilities
from telehealth_backend.core.permissions import HasCapability


class AssistantPermission(HasCapability):
    required_caps = {capabilities.VIEW_DASHBOARD}
