import re

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from ..managers import ClientManager

DEFAULT_FEE = 0.10
DEFAULT_COMMISSION_RATE = 0.0


def client_number(client_id):
    """Numeric part of ids like "MRM-12", used for natural ordering."""
    match = re.search(r"(\d+)", client_id or "")
    return int(match.group(1)) if match else 0


# ---------- Client ----------
# A composer/artist whose royalties the agency collects
class Client(models.Model):
    # Business identifier, e.g. "MRM-1" (entries reference this, not the pk)
    client_id = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=100, blank=True, default="Composer")
    client_type = models.CharField(max_length=100, blank=True, default="")

    # fee (fraction) and commission_rate (percent) express the same cut
    fee = models.FloatField(
        default=DEFAULT_FEE,
        validators=[MinValueValidator(0), MaxValueValidator(1)],
    )
    commission_rate = models.FloatField(
        default=DEFAULT_COMMISSION_RATE,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    # Opening balance brought in from before the ledger existed
    previous_balance = models.FloatField(default=0)

    # Which royalty societies apply to this client
    iprs = models.BooleanField(default=False)
    prs = models.BooleanField(default=False)
    isamra = models.BooleanField(default=False)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ClientManager()

    class Meta:
        indexes = [
            models.Index(fields=["name"], name="royalty_client_name_idx"),
            models.Index(fields=["is_active"], name="royalty_client_active_idx"),
        ]

    def __str__(self):
        return self.display_name

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        # remember what was loaded so save() can tell which of fee/rate was edited
        instance._loaded_rates = (instance.__dict__.get("commission_rate"), instance.__dict__.get("fee"))
        return instance

    @property
    def display_name(self):
        return f"{self.name} ({self.client_id})"

    @property
    def effective_commission_rate(self):
        """Rate used to seed new entries; falls back to the fee when no rate is set."""
        if self.commission_rate:
            return self.commission_rate
        return round(self.fee * 100, 4) if self.fee else 0.0

    def sync_rate_and_fee(self):
        """Keep fee and commission_rate in step when only one of them was edited."""
        loaded_rate, loaded_fee = getattr(
            self, "_loaded_rates", (DEFAULT_COMMISSION_RATE, DEFAULT_FEE)
        )
        rate_changed = self.commission_rate != loaded_rate
        fee_changed = self.fee != loaded_fee
        if rate_changed and not fee_changed:
            self.fee = round(self.commission_rate / 100, 6)
        elif fee_changed and not rate_changed:
            self.commission_rate = round(self.fee * 100, 4)

    def save(self, *args, **kwargs):
        self.sync_rate_and_fee()
        self.full_clean()  # run validations before saving
        super().save(*args, **kwargs)
        self._loaded_rates = (self.commission_rate, self.fee)
