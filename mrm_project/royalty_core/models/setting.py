from django.conf import settings
from django.db import models


def default_settings():
    """Seed values for keys that have never been written."""
    start_year = settings.ROYALTY_DEFAULT_FY_START_YEAR
    return {
        "financialYear": {
            "value": {"startYear": start_year, "endYear": start_year + 1},
            "description": "Current financial year settings",
        },
        "gbpToInrRate": {
            "value": settings.ROYALTY_DEFAULT_GBP_TO_INR_RATE,
            "description": "GBP to INR exchange rate",
        },
        "usdToInrRate": {
            "value": settings.ROYALTY_DEFAULT_USD_TO_INR_RATE,
            "description": "USD to INR exchange rate",
        },
        "gstRate": {
            "value": 0.18,
            "description": "GST rate (18%)",
        },
    }


# ---------- Setting ----------
# Application-wide key/value settings (financial year, exchange rates)
class Setting(models.Model):
    key = models.CharField(max_length=100, unique=True)
    value = models.JSONField()
    description = models.CharField(max_length=255, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key

    @classmethod
    def get_setting(cls, key):
        """Stored value for `key`; known defaults are created on first read."""
        setting = cls.objects.filter(key=key).first()
        if setting is None:
            default = default_settings().get(key)
            if default is None:
                return None
            setting = cls.objects.create(key=key, **default)
        return setting.value

    @classmethod
    def update_setting(cls, key, value, description=None):
        defaults = {"value": value}
        if description is not None:
            defaults["description"] = description
        setting, _ = cls.objects.update_or_create(key=key, defaults=defaults)
        return setting

    @classmethod
    def initialize_defaults(cls):
        # insert missing keys only, never overwrite edited values
        for key, default in default_settings().items():
            cls.objects.get_or_create(key=key, defaults=default)
        return cls.objects.all()
