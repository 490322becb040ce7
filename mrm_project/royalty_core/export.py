"""
CSV renderings of the ledger for the dashboards' download buttons.

Column headings are part of the export contract; spreadsheets built on top of
these files look columns up by name.
"""
import csv
import io

from .services.financial_year import MONTH_LABELS

CLIENT_MASTER_HEADER = ["Client ID", "Client Name", "Type", "Commission Rate"]

COMMISSION_HEADER = [
    "Client ID", "Client Name", "Month", "Year", "Commission Rate",
    "IPRS", "PRS", "Sound Ex", "ISAMRA", "ASCAP", "PPL", "Total Commission",
]

OUTSTANDING_HEADER = ["Client ID", "Client Name", "Latest Month", "Year", "Total Outstanding"]

GST_INVOICE_HEADER = [
    "Client ID", "Client Name", "Month", "Year", "GST Rate", "Total Commission",
    "Current GST Base", "Current GST", "Current Invoice Total",
    "Prev Outstanding GST Base", "Prev Outstanding GST", "Prev Outstanding Invoice Total",
]

RECEIPTS_TDS_HEADER = [
    "Client ID", "Client Name", "Month", "Year", "Total Commission",
    "Current Receipt", "Current TDS", "Previous Receipt", "Previous TDS",
    "Monthly Outstanding", "Total Outstanding",
]


def format_amount(value):
    return f"{value or 0:.2f}"


def format_rate(value):
    """10 -> "10%", 12.5 -> "12.5%"."""
    return f"{value or 0:g}%"


def format_inr(value):
    """Indian digit grouping with a rupee sign: 123456.78 -> "₹1,23,456.78"."""
    value = value or 0
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}₹{whole}.{fraction}"


def _render(header, rows):
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def _entry_prefix(entry):
    return [entry.client_id, entry.client_name, MONTH_LABELS[entry.month], entry.year]


def client_master_csv(clients):
    return _render(CLIENT_MASTER_HEADER, (
        [c.client_id, c.name, c.type, format_rate(c.effective_commission_rate)]
        for c in clients
    ))


def commission_csv(entries):
    return _render(COMMISSION_HEADER, (
        _entry_prefix(e) + [
            format_rate(e.commission_rate),
            format_amount(e.iprs_commission),
            format_amount(e.prs_commission),
            format_amount(e.sound_exchange_commission),
            format_amount(e.isamra_commission),
            format_amount(e.ascap_commission),
            format_amount(e.ppl_commission),
            format_amount(e.total_commission),
        ]
        for e in entries
    ))


def outstanding_csv(entries):
    # expects one row per client, e.g. reports.latest_outstanding()["entries"]
    return _render(OUTSTANDING_HEADER, (
        _entry_prefix(e) + [format_amount(e.total_outstanding)] for e in entries
    ))


def gst_invoice_csv(entries):
    return _render(GST_INVOICE_HEADER, (
        _entry_prefix(e) + [
            format_rate(e.gst_rate),
            format_amount(e.total_commission),
            format_amount(e.current_month_gst_base),
            format_amount(e.current_month_gst),
            format_amount(e.current_month_invoice_total),
            format_amount(e.previous_outstanding_gst_base),
            format_amount(e.previous_outstanding_gst),
            format_amount(e.previous_outstanding_invoice_total),
        ]
        for e in entries
    ))


def receipts_tds_csv(entries):
    return _render(RECEIPTS_TDS_HEADER, (
        _entry_prefix(e) + [
            format_amount(e.total_commission),
            format_amount(e.current_month_receipt),
            format_amount(e.current_month_tds),
            format_amount(e.previous_month_receipt),
            format_amount(e.previous_month_tds),
            format_amount(e.monthly_outstanding),
            format_amount(e.total_outstanding),
        ]
        for e in entries
    ))
