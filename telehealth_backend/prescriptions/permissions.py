from telehealth_backend.core import capabilities
from telehealth_backend.core.permissions import CapabilityPermission, HasCapability


class PrescriptionPermission(CapabilityPermission):
    read_caps = {capabilities.RX_VIEW}
    write_caps = {capabilities.RX_WRITE}


class PrescriptionSignPermission(HasCapability):
    required_caps = {capabilities.RX_SIGN}


class PrescriptionSendPermission(HasCapability):
    required_caps = {capabilities.RX_SIGN, capabilities.PHARMACY_QUEUE}


class PrescriptionStatusPermission(HasCapability):
    required_caps = {capabilities.PHARMACY_FILL, capabilities.RX_WRITE}


class PrescriptionFaxPermission(HasCapability):
    required_caps = {capabilities.RX_VIEW}


class RefillPermission(CapabilityPermission):
    """Refill requests.

    - read: rx:view or rx:refill
    - write (request a refill): rx:refill
    """

    read_caps = {capabilities.RX_VIEW, capabilities.RX_REFILL}
    write_caps = {capabilities.RX_REFILL}


class RefillDecisionPermission(HasCapability):
    required_caps = {capabilities.RX_SIGN}


class FaxLogPermission(CapabilityPermission):
    read_caps = {capabilities.RX_VIEW}
    write_caps = {capabilities.PHARMACY_QUEUE, capabilities.SETTINGS_MANAGE}
