from telehealth_backend.core import capabilities
from telehealth_backend.core.permissions import CapabilityPermission


class PharmacyPermission(CapabilityPermission):
    """Pharmacy directory.

    - read: every role (patients pick a preferred pharmacy)
    - write: admins and pharmacy staff verifying their own listing
    """

    read_caps = {capabilities.VIEW_DASHBOARD}
    write_caps = {capabilities.SETTINGS_MANAGE, capabilities.PHARMACY_VERIFY}
