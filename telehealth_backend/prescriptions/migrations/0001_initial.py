import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("consultations", "0001_initial"),
        ("patients", "0001_initial"),
        ("pharmacies", "0001_initial"),
        ("providers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Prescription",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("medication_name", models.CharField(max_length=255)),
                ("generic_name", models.CharField(blank=True, default="", max_length=255)),
                ("ndc", models.CharField(blank=True, default="", max_length=32)),
                ("dosage", models.CharField(max_length=128)),
                ("form", models.CharField(max_length=64)),
                ("quantity", models.PositiveIntegerField()),
                ("days_supply", models.PositiveIntegerField()),
                ("refills_authorized", models.PositiveIntegerField(default=0)),
                ("refills_used", models.PositiveIntegerField(default=0)),
                ("directions", models.TextField()),
                ("dea_schedule", models.CharField(blank=True, default="", max_length=8)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("pending_review", "Pending review"),
                            ("signed", "Signed"),
                            ("sent", "Sent"),
                            ("filling", "Filling"),
                            ("ready", "Ready"),
                            ("picked_up", "Picked up"),
                            ("delivered", "Delivered"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=16,
                    ),
                ),
                ("e_prescribe_id", models.CharField(blank=True, default="", max_length=128)),
                ("sent_to_pharmacy_at", models.DateTimeField(blank=True, null=True)),
                ("filled_at", models.DateTimeField(blank=True, null=True)),
                ("expires_at", models.DateTimeField()),
                ("next_refill_date", models.DateTimeField(blank=True, null=True)),
                ("prior_auth_required", models.BooleanField(default=False)),
                ("prior_auth_status", models.CharField(blank=True, default="", max_length=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "consultation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="prescriptions",
                        to="consultations.consultation",
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="prescriptions",
                        to="patients.patient",
                    ),
                ),
                (
                    "pharmacy",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="prescriptions",
                        to="pharmacies.pharmacy",
                    ),
                ),
                (
                    "provider",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="prescriptions",
                        to="providers.provider",
                    ),
                ),
            ],
            options={
                "db_table": "prescriptions_prescription",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="RefillRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("requested", "Requested"),
                            ("approved", "Approved"),
                            ("denied", "Denied"),
                            ("filling", "Filling"),
                            ("ready", "Ready"),
                        ],
                        db_index=True,
                        default="requested",
                        max_length=16,
                    ),
                ),
                ("requested_at", models.DateTimeField(auto_now_add=True)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("denial_reason", models.TextField(blank=True, default="")),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="refill_requests",
                        to="patients.patient",
                    ),
                ),
                (
                    "pharmacy",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="refill_requests",
                        to="pharmacies.pharmacy",
                    ),
                ),
                (
                    "prescription",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="refill_requests",
                        to="prescriptions.prescription",
                    ),
                ),
                (
                    "processed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="processed_refills",
                        to="providers.provider",
                    ),
                ),
            ],
            options={
                "db_table": "prescriptions_refill_request",
                "ordering": ["-requested_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="FaxLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("fax_number", models.CharField(max_length=32)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("queued", "Queued"),
                            ("sending", "Sending"),
                            ("sent", "Sent"),
                            ("failed", "Failed"),
                            ("confirmed", "Confirmed"),
                        ],
                        db_index=True,
                        default="queued",
                        max_length=16,
                    ),
                ),
                ("provider_fax_id", models.CharField(blank=True, default="", max_length=64)),
                ("pages", models.PositiveIntegerField(blank=True, null=True)),
                ("error_message", models.TextField(blank=True, default="")),
                ("attempts", models.PositiveIntegerField(default=0)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "pharmacy",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="fax_logs",
                        to="pharmacies.pharmacy",
                    ),
                ),
                (
                    "prescription",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="fax_logs",
                        to="prescriptions.prescription",
                    ),
                ),
            ],
            options={
                "db_table": "prescriptions_fax_log",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
