import logging
from dataclasses import dataclass, field

from django.db import transaction

from ..exceptions import ClientNotFound, EntryNotFound
from ..models import Client, RoyaltyEntry
from ..models.client import client_number
from .calculation import (AMOUNT_FIELDS, DEFAULT_GST_RATE, DEFAULT_ROYALTY_TYPE,
                          round2, to_number)
from .cascade import cascade_update, predecessor_outstanding
from .financial_year import MONTH_ORDER, month_index
from .validation import validate_entry_payload

logger = logging.getLogger(__name__)

# Editable inputs copied straight from the payload (0 when absent)
PLAIN_NUMERIC_FIELDS = (
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


@dataclass
class SaveResult:
    entry: RoyaltyEntry
    created: bool = False
    cascaded_entries: list = field(default_factory=list)
    # supplied previous_month_outstanding disagrees with the predecessor's total
    override_mismatch: bool = False

    @property
    def cascaded_count(self):
        return len(self.cascaded_entries)


def entry_sort_key(entry):
    return (client_number(entry.client_id), MONTH_ORDER.index(entry.month))


def _lock_client(client_id):
    # Row lock serialises save+cascade per client for the rest of the transaction
    try:
        return Client.objects.select_for_update().get(client_id=client_id)
    except Client.DoesNotExist:
        raise ClientNotFound(client_id)


def _resolve_previous_outstanding(client_id, index, financial_year, supplied):
    """Returns (value to store, whether a supplied value breaks the chain)."""
    carried = predecessor_outstanding(client_id, index, financial_year)
    if not to_number(supplied):
        return (carried or 0.0), False
    value = to_number(supplied)
    mismatch = index > 0 and round2(carried or 0.0) != round2(value)
    return value, mismatch


def build_entry_values(client, data, previous_month_outstanding, status):
    """Full set of editable values for an upsert (last write wins)."""
    commission_rate = data.get("commission_rate")
    values = {
        "client_name": client.name,
        "royalty_type": data.get("royalty_type") or DEFAULT_ROYALTY_TYPE,
        "commission_rate": (
            to_number(commission_rate)
            if commission_rate not in (None, "")
            else client.effective_commission_rate
        ),
        # zero-like GST rate falls back to the standard 18%
        "gst_rate": to_number(data.get("gst_rate")) or DEFAULT_GST_RATE,
        "previous_month_outstanding": previous_month_outstanding,
        "status": status or data.get("status") or "draft",
    }
    for name in PLAIN_NUMERIC_FIELDS:
        values[name] = to_number(data.get(name))
    return values


# ----------------------------------------------
# Save workflow: validate → compute → persist → cascade
# ----------------------------------------------
def save_entry(client_id, month, data, financial_year, status=None, sync_client_rate=False):
    """
    Create or replace the entry for (client_id, month) in `financial_year`
    and carry its outstanding forward into later months.
    """
    data = dict(data or {})
    validate_entry_payload(client_id, month, data, status=status)
    index = month_index(month)
    year = financial_year.year_for(month)

    with transaction.atomic():
        client = _lock_client(client_id)

        previous, mismatch = _resolve_previous_outstanding(
            client_id, index, financial_year, data.get("previous_month_outstanding")
        )
        if mismatch:
            logger.warning(
                "Entry %s %s %s saved with previous outstanding %s that differs "
                "from the carried-forward balance",
                client_id, month, year, previous,
            )

        entry = RoyaltyEntry.objects.at(client_id, month, year)
        created = entry is None
        if created:
            entry = RoyaltyEntry(client=client, month=month, year=year)
        for name, value in build_entry_values(client, data, previous, status).items():
            setattr(entry, name, value)
        entry.save()

        cascaded = []
        if index < len(MONTH_ORDER) - 1:
            cascaded = cascade_update(client_id, index + 1, financial_year)

        if sync_client_rate and client.commission_rate != entry.commission_rate:
            client.commission_rate = entry.commission_rate
            client.save()

    logger.info(
        "%s entry %s %s %s (total outstanding %s, %d later month(s) recalculated)",
        "Created" if created else "Updated", client_id, month, year,
        entry.total_outstanding, len(cascaded),
    )
    return SaveResult(entry=entry, created=created, cascaded_entries=cascaded,
                      override_mismatch=mismatch)


def get_entry(client_id, month, financial_year):
    year = financial_year.year_for(month)
    entry = RoyaltyEntry.objects.at(client_id, month, year)
    if entry is None:
        raise EntryNotFound(client_id, month, year)
    return entry


def list_entries(financial_year, client_id=None, month=None):
    """Entries of one financial year ordered by client number, then month order."""
    qs = RoyaltyEntry.objects.for_financial_year(financial_year)
    if client_id:
        qs = qs.for_client(client_id)
    if month:
        month_index(month)
        qs = qs.filter(month=month)
    return sorted(qs, key=entry_sort_key)


def delete_entry(client_id, month, financial_year):
    # Later months keep their stored opening balance until the next save cascades
    entry = get_entry(client_id, month, financial_year)
    entry.delete()
    logger.info("Deleted entry %s %s %s", client_id, month, entry.year)


def previous_outstanding(client_id, month, financial_year):
    """Carry-forward lookup: total_outstanding of the month before `month`, else 0."""
    return predecessor_outstanding(client_id, month_index(month), financial_year) or 0.0


# ----------------------------------------------
# Status workflows
# ----------------------------------------------
def submit_entry(client_id, month, financial_year):
    """Move entry draft → submitted."""
    entry = get_entry(client_id, month, financial_year)
    entry.transition_to("submitted")
    return entry


def reopen_entry(client_id, month, financial_year):
    """Move entry submitted → draft for re-editing."""
    entry = get_entry(client_id, month, financial_year)
    entry.transition_to("draft")
    return entry


# ----------------------------------------------
# Self-heal: rebuild a whole financial year
# ----------------------------------------------
def recalculate_financial_year(financial_year, client_id=None):
    """
    Recompute every stored entry of the year, then cascade each client from
    May. April keeps its stored opening balance. Returns the number of
    entries whose stored figures changed.
    """
    qs = RoyaltyEntry.objects.for_financial_year(financial_year)
    if client_id:
        qs = qs.for_client(client_id)

    changed = 0
    client_ids = set()
    for entry in qs:
        client_ids.add(entry.client_id)
        before = entry.computed_values()
        entry.recalculate()
        if entry.computed_values() != before:
            entry.save()
            changed += 1

    for cid in sorted(client_ids, key=client_number):
        with transaction.atomic():
            _lock_client(cid)
            changed += len(cascade_update(cid, 1, financial_year))

    logger.info("Recalculated %s: %d entr(y/ies) changed", financial_year.label, changed)
    return changed
