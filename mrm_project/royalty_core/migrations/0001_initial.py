import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def amount():
    return models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0)])


def computed():
    return models.FloatField(default=0, editable=False)


def percent(default):
    return models.FloatField(
        default=default,
        validators=[
            django.core.validators.MinValueValidator(0),
            django.core.validators.MaxValueValidator(100),
        ],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("client_id", models.CharField(max_length=50, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("type", models.CharField(blank=True, default="Composer", max_length=100)),
                ("client_type", models.CharField(blank=True, default="", max_length=100)),
                ("fee", models.FloatField(
                    default=0.1,
                    validators=[
                        django.core.validators.MinValueValidator(0),
                        django.core.validators.MaxValueValidator(1),
                    ],
                )),
                ("commission_rate", percent(0.0)),
                ("previous_balance", models.FloatField(default=0)),
                ("iprs", models.BooleanField(default=False)),
                ("prs", models.BooleanField(default=False)),
                ("isamra", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["name"], name="royalty_client_name_idx"),
                    models.Index(fields=["is_active"], name="royalty_client_active_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Setting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=100, unique=True)),
                ("value", models.JSONField()),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="RoyaltyEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("client_name", models.CharField(blank=True, max_length=200)),
                ("month", models.CharField(
                    choices=[
                        ("apr", "Apr"), ("may", "May"), ("jun", "Jun"), ("jul", "Jul"),
                        ("aug", "Aug"), ("sep", "Sep"), ("oct", "Oct"), ("nov", "Nov"),
                        ("dec", "Dec"), ("jan", "Jan"), ("feb", "Feb"), ("mar", "Mar"),
                    ],
                    max_length=3,
                )),
                ("year", models.PositiveIntegerField()),
                ("royalty_type", models.CharField(blank=True, default="IPRS + PRS", max_length=100)),
                ("commission_rate", percent(0)),
                ("gst_rate", percent(18.0)),
                ("iprs_amount", amount()),
                ("prs_gbp", amount()),
                ("gbp_to_inr_rate", amount()),
                ("prs_amount", amount()),
                ("sound_exchange_amount", amount()),
                ("isamra_amount", amount()),
                ("ascap_amount", amount()),
                ("ppl_amount", amount()),
                ("iprs_commission", computed()),
                ("prs_commission", computed()),
                ("sound_exchange_commission", computed()),
                ("isamra_commission", computed()),
                ("ascap_commission", computed()),
                ("ppl_commission", computed()),
                ("total_commission", computed()),
                ("current_month_gst_base", amount()),
                ("previous_outstanding_gst_base", amount()),
                ("current_month_gst", computed()),
                ("current_month_invoice_total", computed()),
                ("previous_outstanding_gst", computed()),
                ("previous_outstanding_invoice_total", computed()),
                ("current_month_receipt", amount()),
                ("current_month_tds", amount()),
                ("previous_month_receipt", amount()),
                ("previous_month_tds", amount()),
                ("previous_month_outstanding", models.FloatField(default=0)),
                ("invoice_pending_current_month", computed()),
                ("previous_invoice_pending", computed()),
                ("monthly_outstanding", computed()),
                ("total_outstanding", computed()),
                ("status", models.CharField(
                    choices=[("draft", "Draft"), ("submitted", "Submitted")],
                    default="draft",
                    max_length=10,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("client", models.ForeignKey(
                    db_column="client_id",
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="entries",
                    to="royalty_core.client",
                    to_field="client_id",
                )),
            ],
            options={
                "indexes": [
                    models.Index(fields=["month", "year"], name="royalty_entry_month_year_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("client", "month", "year"), name="uq_entry_client_month_year"),
                ],
            },
        ),
    ]
