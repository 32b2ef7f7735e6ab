from telehealth_backend.core import capabilities
from telehealth_backend.core.permissions import CapabilityPermission


class PatientPermission(CapabilityPermission):
    """Patient records.

    - staff with patient:view read every record
    - patients (intake:self) read and write their own record only
    - patient:manage writes any record
    """

    read_caps = {capabilities.PATIENT_VIEW, capabilities.INTAKE_SELF}
    write_caps = {capabilities.PATIENT_MANAGE, capabilities.INTAKE_SELF}


class PatientVerificationPermission(CapabilityPermission):
    read_caps = {capabilities.PATIENT_MANAGE}
    write_caps = {capabilities.PATIENT_MANAGE}
