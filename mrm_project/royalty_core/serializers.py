import re

from .services.calculation import COMPUTED_FIELDS

# Persisted entry attributes, in wire order. The camelCase form of these names
# is the contract shared with the CSV export and dashboards.
ENTRY_FIELDS = (
    "client_id",
    "client_name",
    "month",
    "year",
    "royalty_type",
    "commission_rate",
    "gst_rate",
    "iprs_amount",
    "prs_gbp",
    "gbp_to_inr_rate",
    "prs_amount",
    "sound_exchange_amount",
    "isamra_amount",
    "ascap_amount",
    "ppl_amount",
    "current_month_gst_base",
    "previous_outstanding_gst_base",
    "current_month_receipt",
    "current_month_tds",
    "previous_month_receipt",
    "previous_month_tds",
    "previous_month_outstanding",
    *COMPUTED_FIELDS,
    "status",
)

# Keys a save request may carry (clientId and month travel separately)
ENTRY_INPUT_FIELDS = tuple(
    name for name in ENTRY_FIELDS
    if name not in COMPUTED_FIELDS and name not in ("client_id", "client_name", "month", "year")
)

CLIENT_FIELDS = (
    "client_id",
    "name",
    "type",
    "client_type",
    "fee",
    "commission_rate",
    "previous_balance",
    "iprs",
    "prs",
    "isamra",
    "is_active",
)


def snake_to_camel(name):
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def camel_to_snake(name):
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _timestamps(obj):
    return {
        "createdAt": obj.created_at.isoformat() if obj.created_at else None,
        "updatedAt": obj.updated_at.isoformat() if obj.updated_at else None,
    }


def entry_to_dict(entry):
    data = {"id": entry.pk}
    data.update({snake_to_camel(name): getattr(entry, name) for name in ENTRY_FIELDS})
    data.update(_timestamps(entry))
    return data


def client_to_dict(client):
    data = {snake_to_camel(name): getattr(client, name) for name in CLIENT_FIELDS}
    data["displayName"] = client.display_name
    data.update(_timestamps(client))
    return data


def payload_to_data(payload, allowed):
    """Translate a camelCase request body into snake_case keys, keeping only `allowed`."""
    data = {}
    for key, value in (payload or {}).items():
        name = camel_to_snake(key)
        if name in allowed:
            data[name] = value
    return data
