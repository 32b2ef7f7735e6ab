"""Capability bundles per role.

A capability is a named permission such as ``rx:write``. Roles grant fixed
bundles of capabilities; a user without a role ("unverified") has none.
"""

from __future__ import annotations

from typing import Iterable


VIEW_DASHBOARD = 'view:dashboard'
INTAKE_SELF = 'intake:self'
INTAKE_REVIEW = 'intake:review'
RX_VIEW = 'rx:view'
RX_WRITE = 'rx:write'
RX_SIGN = 'rx:sign'
RX_REFILL = 'rx:refill'
CONSULT_START = 'consult:start'
CONSULT_JOIN = 'consult:join'
CONSULT_HISTORY = 'consult:history'
WORKFLOW_VIEW = 'workflow:view'
WORKFLOW_MANAGE = 'workflow:manage'
MSG_VIEW = 'msg:view'
MSG_SEND = 'msg:send'
PHARMACY_QUEUE = 'pharmacy:queue'
PHARMACY_FILL = 'pharmacy:fill'
PHARMACY_VERIFY = 'pharmacy:verify'
PATIENT_VIEW = 'patient:view'
PATIENT_MANAGE = 'patient:manage'
PROVIDER_MANAGE = 'provider:manage'
REPORT_VIEW = 'report:view'
REPORT_EXPORT = 'report:export'
AUDIT_VIEW = 'audit:view'
USER_VIEW = 'user:view'
USER_MANAGE = 'user:manage'
SETTINGS_VIEW = 'settings:view'
SETTINGS_MANAGE = 'settings:manage'

ALL_CAPABILITIES = frozenset({
    VIEW_DASHBOARD,
    INTAKE_SELF,
    INTAKE_REVIEW,
    RX_VIEW,
    RX_WRITE,
    RX_SIGN,
    RX_REFILL,
    CONSULT_START,
    CONSULT_JOIN,
    CONSULT_HISTORY,
    WORKFLOW_VIEW,
    WORKFLOW_MANAGE,
    MSG_VIEW,
    MSG_SEND,
    PHARMACY_QUEUE,
    PHARMACY_FILL,
    PHARMACY_VERIFY,
    PATIENT_VIEW,
    PATIENT_MANAGE,
    PROVIDER_MANAGE,
    REPORT_VIEW,
    REPORT_EXPORT,
    AUDIT_VIEW,
    USER_VIEW,
    USER_MANAGE,
    SETTINGS_VIEW,
    SETTINGS_MANAGE,
})

_NURSE_CAPS = frozenset({
    VIEW_DASHBOARD,
    INTAKE_REVIEW,
    RX_VIEW,
    CONSULT_JOIN,
    CONSULT_HISTORY,
    WORKFLOW_VIEW,
    MSG_VIEW,
    MSG_SEND,
    PATIENT_VIEW,
    PATIENT_MANAGE,
})

ROLE_CAPS: dict[str, frozenset[str]] = {
    'patient': frozenset({
        VIEW_DASHBOARD,
        INTAKE_SELF,
        RX_VIEW,
        RX_REFILL,
        CONSULT_JOIN,
        CONSULT_HISTORY,
        MSG_VIEW,
        MSG_SEND,
    }),
    'nurse': _NURSE_CAPS,
    'provider': _NURSE_CAPS | {
        RX_WRITE,
        RX_SIGN,
        RX_REFILL,
        CONSULT_START,
        WORKFLOW_MANAGE,
    },
    'pharmacy': frozenset({
        VIEW_DASHBOARD,
        RX_VIEW,
        MSG_VIEW,
        MSG_SEND,
        PHARMACY_QUEUE,
        PHARMACY_FILL,
        PHARMACY_VERIFY,
    }),
    'admin': ALL_CAPABILITIES,
}


def role_name_of(user) -> str | None:
    role = getattr(user, 'role', None)
    return getattr(role, 'name', None)


def capabilities_for_role(role_name: str | None) -> frozenset[str]:
    if not role_name:
        return frozenset()
    return ROLE_CAPS.get(role_name, frozenset())


def capabilities_for(user) -> frozenset[str]:
    if user is None or not getattr(user, 'is_authenticated', False):
        return frozenset()
    return capabilities_for_role(role_name_of(user))


def has_cap(user, cap: str) -> bool:
    return cap in capabilities_for(user)


def has_any_cap(user, caps: Iterable[str]) -> bool:
    effective = capabilities_for(user)
    return any(cap in effective for cap in caps)


def is_admin(user) -> bool:
    return role_name_of(user) == 'admin'
