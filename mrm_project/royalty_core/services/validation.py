import math

from django.core.exceptions import ValidationError

from .calculation import AMOUNT_FIELDS, to_number
from .financial_year import MONTH_ORDER

# Inputs that may never be negative
NON_NEGATIVE_FIELDS = (
    *AMOUNT_FIELDS,
    "prs_gbp",
    "gbp_to_inr_rate",
    "current_month_gst_base",
    "previous_outstanding_gst_base",
    "current_month_receipt",
    "current_month_tds",
    "previous_month_receipt",
    "previous_month_tds",
)

PERCENT_FIELDS = ("commission_rate", "gst_rate")

ENTRY_STATUSES = ("draft", "submitted")

# Largest magnitude accepted for any amount (one lakh crore)
MAX_AMOUNT = 1e12


def out_of_range(value):
    """True for a parseable value that is inf, nan or larger than MAX_AMOUNT."""
    if value is None or isinstance(value, bool):
        return False
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return False
    except OverflowError:
        return True
    return not math.isfinite(number) or abs(number) > MAX_AMOUNT


# ------------------------------------
# Entry payload validation, run before
# any computation
# ------------------------------------
def validate_entry_payload(client_id, month, data, status=None):
    errors = {}

    if not client_id:
        errors["client_id"] = "Client ID is required"
    if not month:
        errors["month"] = "Month is required"
    elif month not in MONTH_ORDER:
        errors["month"] = f"Invalid month '{month}'"

    for field in (*NON_NEGATIVE_FIELDS, *PERCENT_FIELDS, "previous_month_outstanding"):
        if out_of_range(data.get(field)):
            errors[field] = f"Amount must be a finite number no larger than {MAX_AMOUNT:,.0f}"

    for field in NON_NEGATIVE_FIELDS:
        if field not in errors and to_number(data.get(field)) < 0:
            errors[field] = "Amount cannot be negative"

    for field in PERCENT_FIELDS:
        value = to_number(data.get(field))
        if field not in errors and not 0 <= value <= 100:
            errors[field] = "Rate must be between 0 and 100"

    status = status or data.get("status")
    if status and status not in ENTRY_STATUSES:
        errors["status"] = f"Invalid status '{status}'"

    if errors:
        raise ValidationError(errors)


def validate_start_year(value):
    try:
        start_year = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Valid start year is required")
    if start_year < 1900:
        raise ValidationError("Valid start year is required")
    return start_year


def validate_exchange_rate(value):
    rate = to_number(value)
    if rate <= 0:
        raise ValidationError("Valid exchange rate is required")
    return rate
