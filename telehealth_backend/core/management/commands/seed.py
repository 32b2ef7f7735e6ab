"""
Seed command: reproducible demo data.

Usage:
    python manage.py seed           # seed every app
    python manage.py seed --flush   # drop seed users and pharmacies first

Every seed account uses the password 'test1234'.
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from telehealth_backend.core.seeders import seed_core
from telehealth_backend.patients.seeders import seed_patients
from telehealth_backend.pharmacies.seeders import seed_pharmacies
from telehealth_backend.providers.seeders import seed_providers


class Command(BaseCommand):
    help = "Seed database with demo data for the telehealth portal"

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing seed users and pharmacies before seeding.",
        )

    def handle(self, *args, **options):
        flush = options.get("flush", False)

        self.stdout.write("=" * 60)
        self.stdout.write("  Telehealth seed")
        self.stdout.write("=" * 60)

        with transaction.atomic():
            stats = {}

            self.stdout.write("\n[1/4] Core (roles, users, audit log)...")
            stats.update(self._run(seed_core(flush=flush)))

            self.stdout.write("\n[2/4] Pharmacies...")
            stats.update(self._run(seed_pharmacies(flush=flush)))

            self.stdout.write("\n[3/4] Providers...")
            stats.update(self._run(seed_providers()))

            self.stdout.write("\n[4/4] Patients...")
            stats.update(self._run(seed_patients()))

        self.stdout.write("\n" + "=" * 60)
        self.stdout.write(self.style.SUCCESS("Seeding finished."))
        for key, value in sorted(stats.items()):
            self.stdout.write(f"  - {key}: {value}")

    def _run(self, stats):
        for key, value in stats.items():
            self.stdout.write(f"  {key}: {value}")
        return stats
