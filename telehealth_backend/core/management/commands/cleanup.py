"""
Run the scheduled housekeeping jobs once, synchronously.

Usage:
    python manage.py cleanup                    # every job
    python manage.py cleanup --only rate_limits # a single job
"""

from django.core.management.base import BaseCommand, CommandError

from telehealth_backend.core import cleanup
from telehealth_backend.intake.services import expire_stale_intakes

JOBS = {
    'challenges': cleanup.cleanup_expired_challenges,
    'magic_links': cleanup.cleanup_magic_link_codes,
    'rate_limits': cleanup.cleanup_expired_rate_limits,
    'intakes': expire_stale_intakes,
    'audit_logs': cleanup.purge_old_audit_logs,
}


class Command(BaseCommand):
    help = "Run portal cleanup jobs (challenges, codes, rate limits, stale intakes, audit logs)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--only",
            choices=sorted(JOBS),
            help="Run a single job instead of all of them.",
        )

    def handle(self, *args, **options):
        only = options.get("only")
        if only and only not in JOBS:
            raise CommandError(f"Unknown job: {only}")

        names = [only] if only else list(JOBS)
        for name in names:
            count = JOBS[name]()
            self.stdout.write(f"  {name}: {count}")
        self.stdout.write(self.style.SUCCESS("Cleanup finished."))
