from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from ..managers import RoyaltyEntryManager
from ..services.calculation import (COMPUTED_FIELDS, DEFAULT_GST_RATE,
                                    DEFAULT_ROYALTY_TYPE, NUMERIC_INPUT_FIELDS,
                                    compute)
from ..services.financial_year import MONTH_ORDER
from .client import Client

MONTH_CHOICES = [(m, m.capitalize()) for m in MONTH_ORDER]

STATUS_CHOICES = [
    ("draft", "Draft"),
    ("submitted", "Submitted"),
]


def amount_field():
    # editable source amounts, receipts and TDS are never negative
    return models.FloatField(default=0, validators=[MinValueValidator(0)])


def computed_field():
    return models.FloatField(default=0, editable=False)


# ---------- RoyaltyEntry ----------
# One client's accounting record for one month of a financial year
class RoyaltyEntry(models.Model):
    client = models.ForeignKey(
        Client,
        to_field="client_id",
        db_column="client_id",
        on_delete=models.CASCADE,
        related_name="entries",
    )
    # Denormalised for reports/exports; kept in sync by signals.client_renamed
    client_name = models.CharField(max_length=200, blank=True)
    month = models.CharField(max_length=3, choices=MONTH_CHOICES)
    year = models.PositiveIntegerField()  # calendar year this month falls in
    royalty_type = models.CharField(max_length=100, blank=True, default=DEFAULT_ROYALTY_TYPE)

    # Configurable rates (percent)
    commission_rate = models.FloatField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    gst_rate = models.FloatField(
        default=DEFAULT_GST_RATE, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )

    # Royalty amount inputs (INR, except prs_gbp)
    iprs_amount = amount_field()
    prs_gbp = amount_field()
    gbp_to_inr_rate = amount_field()
    prs_amount = amount_field()
    sound_exchange_amount = amount_field()
    isamra_amount = amount_field()
    ascap_amount = amount_field()
    ppl_amount = amount_field()

    # Computed commissions
    iprs_commission = computed_field()
    prs_commission = computed_field()
    sound_exchange_commission = computed_field()
    isamra_commission = computed_field()
    ascap_commission = computed_field()
    ppl_commission = computed_field()
    total_commission = computed_field()

    # GST & invoice inputs
    current_month_gst_base = amount_field()
    previous_outstanding_gst_base = amount_field()

    # Computed GST & invoices
    current_month_gst = computed_field()
    current_month_invoice_total = computed_field()
    previous_outstanding_gst = computed_field()
    previous_outstanding_invoice_total = computed_field()

    # Receipts & TDS
    current_month_receipt = amount_field()
    current_month_tds = amount_field()
    previous_month_receipt = amount_field()
    previous_month_tds = amount_field()

    # Carry-forward link: prior month's total_outstanding (may be negative)
    previous_month_outstanding = models.FloatField(default=0)

    # Computed outstanding
    invoice_pending_current_month = computed_field()
    previous_invoice_pending = computed_field()
    monthly_outstanding = computed_field()
    total_outstanding = computed_field()

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="draft")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = RoyaltyEntryManager()

    class Meta:
        indexes = [
            models.Index(fields=["month", "year"], name="royalty_entry_month_year_idx"),
        ]
        # one entry per client per month per year
        constraints = [
            models.UniqueConstraint(
                fields=["client", "month", "year"], name="uq_entry_client_month_year"
            ),
        ]

    def __str__(self):
        return f"{self.client_id} {self.month} {self.year}"

    def input_values(self):
        return {field: getattr(self, field) for field in NUMERIC_INPUT_FIELDS}

    def recalculate(self):
        """Overwrite every derived field from this entry's own inputs."""
        for field, value in compute(self.input_values()).items():
            setattr(self, field, value)

    def computed_values(self):
        return {field: getattr(self, field) for field in COMPUTED_FIELDS}

    def save(self, *args, **kwargs):
        if not self.client_name and self.client_id:
            self.client_name = self.client.name
        # derived fields are never stale relative to their inputs after a write
        self.recalculate()
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)

    def transition_to(self, new_status):
        # Current state vs. allowed next states
        allowed = {
            "draft": ["submitted"],
            "submitted": ["draft"],  # explicit re-edit
        }
        if new_status not in allowed.get(self.status, []):
            raise ValidationError(f"Cannot go from {self.status} to {new_status}")
        self.status = new_status
        self.save()
