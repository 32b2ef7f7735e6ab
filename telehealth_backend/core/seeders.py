from django.contrib.auth import get_user_model
from django.db import transaction

from .accounts import ROLE_LABELS, get_role
from .models import AuditLog, Role
from .utils import log_action

User = get_user_model()

SEED_DOMAIN = "@seed.local"
SEED_PASSWORD = "test1234"


def seed_core(flush: bool = False) -> dict:
    """
    Seeds:
    - roles
    - one demo user per role (plus a second patient)
    - a handful of audit log rows

    With flush=True seed users (email ending in '@seed.local') and their
    audit rows are deleted first. Superusers are never touched.
    """
    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            AuditLog.objects.filter(actor_email__endswith=SEED_DOMAIN).delete()
            User.objects.filter(is_superuser=False, email__endswith=SEED_DOMAIN).delete()

        roles = _seed_roles()
        stats["core_roles"] = len(roles)

        users = _seed_users()
        stats["core_users"] = len(users)

        stats["core_audit_logs"] = _seed_audit_logs(users)

    return stats


def _seed_roles() -> list[Role]:
    return [get_role(name) for name in ROLE_LABELS]


def _seed_users() -> dict[str, User]:
    definitions = [
        ("admin", "Avery", "Admin", Role.ADMIN),
        ("dr.hart", "Maya", "Hart", Role.PROVIDER),
        ("nurse.cole", "Jordan", "Cole", Role.NURSE),
        ("pharmacy.main", "Main Street", "Pharmacy", Role.PHARMACY),
        ("patient.lee", "Sam", "Lee", Role.PATIENT),
        ("patient.rivera", "Alex", "Rivera", Role.PATIENT),
    ]

    users: dict[str, User] = {}
    for username, first_name, last_name, role_name in definitions:
        email = f"{username}{SEED_DOMAIN}"
        user = User.objects.filter(email=email).first()
        if user is None:
            user = User.objects.create_user(
                username=username,
                email=email,
                password=SEED_PASSWORD,
                first_name=first_name,
                last_name=last_name,
            )
        user.role = get_role(role_name)
        user.is_staff = role_name == Role.ADMIN
        user.save()
        users[username] = user
    return users


def _seed_audit_logs(users: dict[str, User]) -> int:
    admin = users.get("admin")
    if admin is None:
        return 0

    count = 0
    for username, user in users.items():
        if log_action(admin, "user_seeded", "user", user.id, changes={"role": user.role_name}) is not None:
            count += 1
    return count
