from ..models.client import client_number
from .calculation import AMOUNT_FIELDS, round2
from .entries import list_entries
from .financial_year import MONTH_ORDER

GST_INVOICE_FIELDS = (
    "total_commission",
    "current_month_gst_base",
    "current_month_gst",
    "current_month_invoice_total",
    "previous_outstanding_gst_base",
    "previous_outstanding_gst",
    "previous_outstanding_invoice_total",
)

RECEIPTS_TDS_FIELDS = (
    "total_commission",
    "current_month_receipt",
    "current_month_tds",
    "previous_month_receipt",
    "previous_month_tds",
    "monthly_outstanding",
    "total_outstanding",
)

# summary key -> source amount field
SUMMARY_SOURCE_TOTALS = {
    "total_iprs": "iprs_amount",
    "total_prs": "prs_amount",
    "total_sound_ex": "sound_exchange_amount",
    "total_isamra": "isamra_amount",
    "total_ascap": "ascap_amount",
    "total_ppl": "ppl_amount",
}


def sum_fields(entries, fields):
    totals = {name: 0.0 for name in fields}
    for entry in entries:
        for name in fields:
            totals[name] += getattr(entry, name) or 0.0
    return {name: round2(value) for name, value in totals.items()}


def status_counts(entries):
    draft = sum(1 for e in entries if e.status == "draft")
    return {"draft_count": draft, "submitted_count": len(entries) - draft}


def gst_invoice_report(financial_year):
    entries = list_entries(financial_year)
    return {"entries": entries, "totals": sum_fields(entries, GST_INVOICE_FIELDS)}


def receipts_tds_report(financial_year):
    entries = list_entries(financial_year)
    return {"entries": entries, "totals": sum_fields(entries, RECEIPTS_TDS_FIELDS)}


def summary_report(financial_year):
    entries = list_entries(financial_year)
    sums = sum_fields(
        entries,
        (*AMOUNT_FIELDS, "total_commission", "monthly_outstanding", "total_outstanding"),
    )
    summary = {"total_entries": len(entries), **status_counts(entries)}
    for key, amount_field in SUMMARY_SOURCE_TOTALS.items():
        summary[key] = sums[amount_field]
    summary["total_commission"] = sums["total_commission"]
    summary["total_monthly_outstanding"] = sums["monthly_outstanding"]
    summary["total_final_outstanding"] = sums["total_outstanding"]
    return summary


def client_report(client_id, financial_year):
    entries = list_entries(financial_year, client_id=client_id)
    sums = sum_fields(entries, ("total_commission", "total_outstanding"))
    return {"entries": entries, "summary": {**sums, **status_counts(entries)}}


def latest_outstanding(financial_year):
    """Each client's latest-month entry in the year, plus the grand total."""
    latest = {}
    for entry in list_entries(financial_year):
        current = latest.get(entry.client_id)
        if current is None or MONTH_ORDER.index(entry.month) > MONTH_ORDER.index(current.month):
            latest[entry.client_id] = entry
    rows = sorted(latest.values(), key=lambda e: client_number(e.client_id))
    grand_total = round2(sum(e.total_outstanding for e in rows))
    return {"entries": rows, "grand_total": grand_total}
