"""
Monthly royalty calculation engine.

Pure functions only: no ORM access, no settings lookups. Every derived
monetary field is rounded to 2 decimals after each intermediate step, and
later steps consume the rounded values. Stored figures and the cascade's
fixed-point comparison depend on reproducing that exact sequence.
"""
import math
import sys

EPSILON = sys.float_info.epsilon

DEFAULT_GST_RATE = 18.0
DEFAULT_ROYALTY_TYPE = "IPRS + PRS"

# (amount field, commission field) per royalty source
SOURCE_FIELDS = (
    ("iprs_amount", "iprs_commission"),
    ("prs_amount", "prs_commission"),
    ("sound_exchange_amount", "sound_exchange_commission"),
    ("isamra_amount", "isamra_commission"),
    ("ascap_amount", "ascap_commission"),
    ("ppl_amount", "ppl_commission"),
)

AMOUNT_FIELDS = tuple(amount for amount, _ in SOURCE_FIELDS)

# Numeric inputs read by compute(); prs_gbp and gbp_to_inr_rate are editable
# but only feed prs_amount through link_prs_fields()
NUMERIC_INPUT_FIELDS = (
    "commission_rate",
    "gst_rate",
    *AMOUNT_FIELDS,
    "current_month_gst_base",
    "previous_outstanding_gst_base",
    "current_month_receipt",
    "current_month_tds",
    "previous_month_receipt",
    "previous_month_tds",
    "previous_month_outstanding",
)

COMPUTED_FIELDS = (
    *(commission for _, commission in SOURCE_FIELDS),
    "total_commission",
    "current_month_gst",
    "current_month_invoice_total",
    "previous_outstanding_gst",
    "previous_outstanding_invoice_total",
    "invoice_pending_current_month",
    "previous_invoice_pending",
    "monthly_outstanding",
    "total_outstanding",
)


def round2(value):
    """Round half up to 2 decimals after nudging by machine epsilon."""
    scaled = (value + EPSILON) * 100
    # inf/nan have no integer part; pass them through untouched
    if not math.isfinite(scaled):
        return value
    whole = math.floor(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    return whole / 100


def to_number(value):
    """Coerce a raw input to float; missing, unparsable or non-finite values become 0."""
    if value is None or isinstance(value, bool):
        return float(value or 0)
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).replace(",", "").strip())
    except (ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def normalize_inputs(inputs):
    """Return every numeric input as a float, defaulting absent ones to 0."""
    return {field: to_number(inputs.get(field)) for field in NUMERIC_INPUT_FIELDS}


def compute(inputs):
    """
    Derive all computed fields of one month's entry.

    `inputs` is any mapping keyed by the snake_case input field names.
    Deterministic and idempotent; never raises on missing inputs.
    """
    v = normalize_inputs(inputs)
    out = {}

    # 1. Commission per source, total from the rounded parts
    rate = v["commission_rate"] / 100
    for amount_field, commission_field in SOURCE_FIELDS:
        out[commission_field] = round2(v[amount_field] * rate)
    total_commission = 0.0
    for _, commission_field in SOURCE_FIELDS:
        total_commission += out[commission_field]
    out["total_commission"] = round2(total_commission)

    # 2. GST & invoice totals
    gst_multiplier = v["gst_rate"] / 100
    current_base = v["current_month_gst_base"]
    previous_base = v["previous_outstanding_gst_base"]

    out["current_month_gst"] = round2(current_base * gst_multiplier)
    out["current_month_invoice_total"] = round2(current_base + out["current_month_gst"])
    out["previous_outstanding_gst"] = round2(previous_base * gst_multiplier)
    out["previous_outstanding_invoice_total"] = round2(
        previous_base + out["previous_outstanding_gst"]
    )

    # 3. Pending amounts
    out["invoice_pending_current_month"] = round2(out["total_commission"] - current_base)
    out["previous_invoice_pending"] = round2(v["previous_month_outstanding"] - previous_base)

    # 4. Monthly outstanding
    out["monthly_outstanding"] = round2(
        out["invoice_pending_current_month"]
        + out["current_month_invoice_total"]
        - v["current_month_receipt"]
        - v["current_month_tds"]
    )

    # 5. Total outstanding carried into next month
    out["total_outstanding"] = round2(
        out["previous_invoice_pending"]
        + out["previous_outstanding_invoice_total"]
        - v["previous_month_receipt"]
        - v["previous_month_tds"]
        + out["monthly_outstanding"]
    )
    return out


def link_prs_fields(values, edited_field):
    """
    Resolve the linked PRS trio after `edited_field` changed.

    Any two of prs_gbp, gbp_to_inr_rate and prs_amount determine the third.
    Returns a new dict; the input mapping is left untouched. Editing-surface
    helper only, compute() always uses prs_amount as given.
    """
    result = dict(values)
    gbp = to_number(result.get("prs_gbp"))
    rate = to_number(result.get("gbp_to_inr_rate"))

    if edited_field in ("prs_gbp", "gbp_to_inr_rate"):
        if gbp and rate:
            result["prs_amount"] = round2(gbp * rate)
    elif edited_field == "prs_amount":
        inr = to_number(result.get("prs_amount"))
        if gbp and inr and not rate:
            result["gbp_to_inr_rate"] = round2(inr / gbp)
        elif rate and inr and not gbp:
            result["prs_gbp"] = round2(inr / rate)
        elif gbp and inr:
            result["gbp_to_inr_rate"] = round2(inr / gbp)
    return result
