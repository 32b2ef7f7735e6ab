import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Pharmacy",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("ncpdp_id", models.CharField(blank=True, default="", max_length=32)),
                ("npi_number", models.CharField(blank=True, db_index=True, default="", max_length=10)),
                ("street", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=128)),
                ("state", models.CharField(blank=True, db_index=True, default="", max_length=2)),
                ("zip_code", models.CharField(blank=True, default="", max_length=10)),
                ("phone", models.CharField(blank=True, default="", max_length=32)),
                ("fax", models.CharField(blank=True, default="", max_length=32)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("retail", "Retail"),
                            ("compounding", "Compounding"),
                            ("mail_order", "Mail order"),
                            ("specialty", "Specialty"),
                        ],
                        default="retail",
                        max_length=20,
                    ),
                ),
                ("accepts_e_prescribe", models.BooleanField(default=False)),
                ("capabilities", models.JSONField(blank=True, default=list)),
                (
                    "tier",
                    models.PositiveSmallIntegerField(
                        default=3,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive"), ("suspended", "Suspended")],
                        db_index=True,
                        default="active",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "Pharmacies",
                "db_table": "pharmacies_pharmacy",
                "ordering": ["name", "id"],
            },
        ),
    ]
