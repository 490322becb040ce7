import logging

from django.core.exceptions import ValidationError

from ..models import RoyaltyEntry
from .calculation import round2
from .financial_year import MONTH_ORDER, previous_month

logger = logging.getLogger(__name__)


def predecessor_outstanding(client_id, index, financial_year):
    """
    Stored total_outstanding of the month before MONTH_ORDER[index], or None
    when there is no earlier month in the year or no entry for it.
    """
    prev_month = previous_month(MONTH_ORDER[index]) if index >= 0 else None
    if prev_month is None:
        return None
    prev_entry = RoyaltyEntry.objects.at(client_id, prev_month, financial_year.year_for(prev_month))
    return prev_entry.total_outstanding if prev_entry else None


def cascade_update(client_id, start_month_index, financial_year):
    """
    Carry total_outstanding forward from MONTH_ORDER[start_month_index] to March.

    Months without an entry are skipped and the walk keeps going. An entry
    whose previous_month_outstanding already matches its predecessor is left
    untouched. Changed entries are recomputed and saved one at a time, so a
    persistence error stops the walk with earlier writes kept. Returns the
    entries that changed, in month order.
    """
    if start_month_index < 0:
        raise ValidationError(f"Invalid start month index {start_month_index}")

    updated = []
    months = financial_year.months()
    for i in range(start_month_index, len(months)):
        month, year = months[i]
        entry = RoyaltyEntry.objects.at(client_id, month, year)
        if entry is None:
            continue

        # missing predecessor carries 0
        carried = round2(predecessor_outstanding(client_id, i, financial_year) or 0.0)
        if entry.previous_month_outstanding == carried:
            continue

        logger.debug(
            "Cascade %s %s %s: previous outstanding %s -> %s",
            client_id, month, entry.year, entry.previous_month_outstanding, carried,
        )
        entry.previous_month_outstanding = carried
        entry.save()  # save() recomputes every derived field
        updated.append(entry)

    if updated:
        logger.info(
            "Cascade for %s (%s) from %s updated %d month(s): %s",
            client_id, financial_year.label, MONTH_ORDER[start_month_index],
            len(updated), ", ".join(e.month for e in updated),
        )
    return updated
