from telehealth_backend.core import capabilities
from telehealth_backend.core.permissions import CapabilityPermission, HasCapability


class ConsultationPermission(CapabilityPermission):
    """Consultation records.

    - read: consult:history, consult:join or consult:start
    - write: consult:start (providers) or consult:join (patients, nurses)
    """

    read_caps = {capabilities.CONSULT_HISTORY, capabilities.CONSULT_JOIN, capabilities.CONSULT_START}
    write_caps = {capabilities.CONSULT_START, capabilities.CONSULT_JOIN}


class ConsultationStartPermission(HasCapability):
    """Provider-only lifecycle actions (schedule, start, complete, claim)."""

    required_caps = {capabilities.CONSULT_START}


class ConsultationQueuePermission(HasCapability):
    required_caps = {capabilities.CONSULT_START, capabilities.WORKFLOW_VIEW}
