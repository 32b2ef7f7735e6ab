import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Provider",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(db_index=True, max_length=254)),
                ("first_name", models.CharField(max_length=150)),
                ("last_name", models.CharField(max_length=150)),
                (
                    "title",
                    models.CharField(
                        choices=[("MD", "MD"), ("DO", "DO"), ("PA", "PA"), ("NP", "NP"), ("APRN", "APRN")],
                        max_length=8,
                    ),
                ),
                ("npi_number", models.CharField(max_length=10, unique=True)),
                ("dea_number", models.CharField(blank=True, default="", max_length=16)),
                ("specialties", models.JSONField(blank=True, default=list)),
                ("licensed_states", models.JSONField(blank=True, default=list)),
                ("availability", models.JSONField(blank=True, null=True)),
                ("accepting_patients", models.BooleanField(default=True)),
                ("consultation_rate", models.PositiveIntegerField(default=0)),
                ("max_daily_consultations", models.PositiveIntegerField(default=20)),
                ("current_queue_size", models.PositiveIntegerField(default=0)),
                ("total_consultations", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("onboarding", "Onboarding"),
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                            ("suspended", "Suspended"),
                        ],
                        db_index=True,
                        default="onboarding",
                        max_length=16,
                    ),
                ),
                ("credential_verified_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="provider_profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "providers_provider",
                "ordering": ["last_name", "first_name", "id"],
            },
        ),
    ]
