import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import ClientNotFound
from ..models import Client, RoyaltyEntry
from ..models.client import DEFAULT_FEE, client_number
from .calculation import to_number

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name", "type", "client_type", "fee", "commission_rate",
    "previous_balance", "iprs", "prs", "isamra", "is_active",
)


def get_client(client_id):
    try:
        return Client.objects.get(client_id=client_id)
    except Client.DoesNotExist:
        raise ClientNotFound(client_id)


def list_clients(search=None, include_inactive=False):
    qs = Client.objects.all() if include_inactive else Client.objects.active()
    if search:
        qs = qs.search(search)
    return sorted(qs, key=lambda c: client_number(c.client_id))


def _apply(client, data):
    for name in EDITABLE_FIELDS:
        if name in data and data[name] is not None:
            value = data[name]
            if name in ("fee", "commission_rate", "previous_balance"):
                value = to_number(value)
            setattr(client, name, value)


def create_client(data):
    """
    Register a client. Re-using the id of a deactivated client reactivates
    it with the new details.
    """
    client_id = (data.get("client_id") or "").strip()
    if not client_id:
        raise ValidationError({"client_id": "Client ID is required"})

    existing = Client.objects.filter(client_id=client_id).first()
    if existing:
        if existing.is_active:
            raise ValidationError({"client_id": "Client ID already exists"})
        _apply(existing, {k: v for k, v in data.items() if k != "is_active"})
        existing.is_active = True
        existing.save()
        logger.info("Reactivated client %s", client_id)
        return existing

    client = Client(client_id=client_id, fee=DEFAULT_FEE)
    _apply(client, data)
    client.save()
    logger.info("Created client %s", client_id)
    return client


def update_client(client_id, data):
    # name changes reach the client's entries via signals.client_renamed
    client = get_client(client_id)
    _apply(client, data)
    client.save()
    return client


def remove_client(client_id, permanent=False):
    """
    Delete every entry of the client, then either deactivate the client
    (default) or delete it outright.
    """
    with transaction.atomic():
        client = get_client(client_id)
        deleted, _ = RoyaltyEntry.objects.for_client(client_id).delete()
        if permanent:
            client.delete()
        else:
            client.is_active = False
            client.save()
    logger.info(
        "%s client %s and removed %d entr(y/ies)",
        "Deleted" if permanent else "Deactivated", client_id, deleted,
    )
    return client
