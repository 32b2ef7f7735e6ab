from telehealth_backend.core import capabilities
from telehealth_backend.core.permissions import CapabilityPermission, HasCapability


class IntakePermission(CapabilityPermission):
    """Patients fill in their own intakes; clinical staff review them."""

    read_caps = {capabilities.INTAKE_SELF, capabilities.INTAKE_REVIEW}
    write_caps = {capabilities.INTAKE_SELF, capabilities.INTAKE_REVIEW}


class IntakeReviewPermission(HasCapability):
    required_caps = {capabilities.INTAKE_REVIEW}
