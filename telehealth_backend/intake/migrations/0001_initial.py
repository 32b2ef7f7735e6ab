import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("patients", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Intake",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(db_index=True, max_length=254)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("in_progress", "In progress"),
                            ("completed", "Completed"),
                            ("expired", "Expired"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=16,
                    ),
                ),
                ("medical_history", models.JSONField(blank=True, null=True)),
                ("current_symptoms", models.JSONField(blank=True, null=True)),
                ("medications", models.JSONField(blank=True, null=True)),
                ("allergies", models.JSONField(blank=True, null=True)),
                ("chief_complaint", models.TextField(blank=True, default="")),
                ("symptom_duration", models.CharField(blank=True, default="", max_length=128)),
                (
                    "severity_level",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(10),
                        ],
                    ),
                ),
                ("vital_signs", models.JSONField(blank=True, null=True)),
                ("id_verified", models.BooleanField(default=False)),
                ("consent_given", models.BooleanField(default=False)),
                ("completed_steps", models.JSONField(blank=True, default=list)),
                ("triage_result", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "patient",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="intakes",
                        to="patients.patient",
                    ),
                ),
            ],
            options={
                "db_table": "intake_intake",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
