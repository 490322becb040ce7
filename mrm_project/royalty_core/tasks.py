import logging
import smtplib

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone
from django.utils.html import format_html, format_html_join

from .export import format_inr
from .services.financial_year import (MONTH_LABELS, FinancialYear,
                                      current_financial_year)

logger = logging.getLogger(__name__)


def render_outstanding_html(rows, grand_total, financial_year):
    """HTML table of each client's latest outstanding balance."""
    body = format_html_join(
        "\n",
        "<tr><td>{}</td><td>{}</td><td>{} {}</td><td style=\"text-align:right\">{}</td></tr>",
        (
            (e.client_id, e.client_name, MONTH_LABELS[e.month], e.year, format_inr(e.total_outstanding))
            for e in rows
        ),
    )
    return format_html(
        "<h2>Outstanding balances, {}</h2>"
        "<table border=\"1\" cellpadding=\"6\" cellspacing=\"0\">"
        "<thead><tr><th>Client ID</th><th>Client Name</th><th>Latest Month</th>"
        "<th>Total Outstanding</th></tr></thead>"
        "<tbody>{}</tbody>"
        "<tfoot><tr><th colspan=\"3\">Grand Total</th>"
        "<th style=\"text-align:right\">{}</th></tr></tfoot>"
        "</table>",
        financial_year.label,
        body,
        format_inr(grand_total),
    )


def render_outstanding_text(rows, grand_total, financial_year):
    lines = [f"Outstanding balances, {financial_year.label}", ""]
    for e in rows:
        lines.append(
            f"{e.client_id}  {e.client_name}  {MONTH_LABELS[e.month]} {e.year}  "
            f"{format_inr(e.total_outstanding)}"
        )
    lines += ["", f"Grand Total: {format_inr(grand_total)}"]
    return "\n".join(lines)


@shared_task  # scheduled daily by CELERY_BEAT_SCHEDULE
def send_outstanding_notification(start_year=None):
    """
    Email the latest-outstanding digest for one financial year (the configured
    one unless `start_year` is given). Returns the number of client rows sent.
    """
    # import lazily to avoid circular imports at module import time
    from .services.reports import latest_outstanding

    fy = FinancialYear.from_start_year(start_year) if start_year else current_financial_year()
    recipients = list(settings.OUTSTANDING_REPORT_RECIPIENTS)
    if not recipients:
        logger.warning("No OUTSTANDING_REPORT_RECIPIENTS configured, skipping digest")
        return 0

    report = latest_outstanding(fy)
    rows = report["entries"]
    if not rows:
        logger.info("No entries for %s, skipping outstanding digest", fy.label)
        return 0

    subject = f"Outstanding report {fy.label} ({timezone.localdate():%d %b %Y})"
    try:
        send_mail(
            subject,
            render_outstanding_text(rows, report["grand_total"], fy),
            settings.DEFAULT_FROM_EMAIL,
            recipients,
            html_message=render_outstanding_html(rows, report["grand_total"], fy),
        )
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send outstanding digest for %s", fy.label)
        return 0

    logger.info("Sent outstanding digest for %s to %d recipient(s)", fy.label, len(recipients))
    return len(rows)


@shared_task
def recalculate_financial_year_task(start_year, client_id=None):
    from .services.entries import recalculate_financial_year

    return recalculate_financial_year(FinancialYear.from_start_year(start_year), client_id=client_id)
