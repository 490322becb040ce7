"""
Row parsing for the agency's billing workbook ("Royalty Clients" sheet).

Each client row holds the client master data followed by one 13-column block
per month, April to December.
"""
from .calculation import DEFAULT_ROYALTY_TYPE, link_prs_fields, to_number

CLIENT_SHEET = "Royalty Clients"
CLIENT_ID_PREFIX = "MRM"

# client master columns
COL_CLIENT_ID = 0
COL_NAME = 1
COL_TYPE = 2
COL_RATE = 3
COL_IPRS = 5
COL_PRS = 6
COL_ISAMRA = 7
COL_OPENING_OUTSTANDING = 8  # April's previous month outstanding

MONTH_BLOCK_WIDTH = 13
FIRST_MONTH_COLUMN = 9
WORKBOOK_MONTHS = ("apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")
MONTH_START = {
    month: FIRST_MONTH_COLUMN + i * MONTH_BLOCK_WIDTH for i, month in enumerate(WORKBOOK_MONTHS)
}

# entry field -> offset inside a month block
MONTH_BLOCK_OFFSETS = {
    "iprs_amount": 0,
    "prs_gbp": 1,
    "prs_amount": 2,
    "sound_exchange_amount": 3,
    "isamra_amount": 4,
    "ascap_amount": 5,
    "ppl_amount": 6,
    "current_month_gst_base": 7,
    "previous_outstanding_gst_base": 8,
    "current_month_receipt": 9,
    "previous_month_receipt": 10,
    "current_month_tds": 11,
    "previous_month_tds": 12,
}

RETAINER_MARKERS = ("yearly", "monthly", "retainer")


def cell(row, index):
    return row[index] if index < len(row) else None


def parse_num(value):
    """Lenient amount parsing: commas, pound signs and dashes are tolerated."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).replace(",", "").replace("£", "").replace(" ", "").strip()
    if text in ("", "-", "--"):
        return 0.0
    return to_number(text)


def parse_bool(value):
    return str(value or "").strip().upper() in ("YES", "Y")


def parse_rate(value):
    """
    Commission percent from the rate column. Fractions up to 1 are treated as
    ratios (0.25 -> 25); retainer descriptions such as "60000 yearly" give 0.
    """
    if value is None:
        return 0.0
    text = str(value).strip().lower()
    if not text or text == "--" or any(marker in text for marker in RETAINER_MARKERS):
        return 0.0
    rate = parse_num(value)
    if 0 < rate <= 1:
        return round(rate * 100, 4)
    return rate


def royalty_type_for(client_type):
    royalty_type = DEFAULT_ROYALTY_TYPE
    if "ISAMRA" in client_type:
        royalty_type = "IPRS + PRS + ISAMRA"
    if "Sound Exchange" in client_type:
        royalty_type = "IPRS + PRS + ISAMRA + Sound Exchange"
    if "MLC" in client_type:
        royalty_type = "IPRS + PRS + MLC"
    return royalty_type


def is_client_row(row):
    client_id = str(cell(row, COL_CLIENT_ID) or "").strip()
    return client_id.startswith(CLIENT_ID_PREFIX)


def parse_client(row):
    client_id = str(cell(row, COL_CLIENT_ID)).strip()
    rate = parse_rate(cell(row, COL_RATE))
    return {
        "client_id": client_id,
        "name": str(cell(row, COL_NAME) or "").strip() or f"Client {client_id}",
        "type": str(cell(row, COL_TYPE) or "").strip() or "Composer",
        "commission_rate": rate,
        "fee": round(rate / 100, 6),
        "previous_balance": parse_num(cell(row, COL_OPENING_OUTSTANDING)),
        "iprs": parse_bool(cell(row, COL_IPRS)),
        "prs": parse_bool(cell(row, COL_PRS)),
        "isamra": parse_bool(cell(row, COL_ISAMRA)),
    }


def parse_month(row, month):
    """Entry inputs for `month`; the GBP rate is back-solved from the PRS pair."""
    start = MONTH_START[month]
    values = {
        name: parse_num(cell(row, start + offset)) for name, offset in MONTH_BLOCK_OFFSETS.items()
    }
    values["gbp_to_inr_rate"] = 0.0
    return link_prs_fields(values, "prs_amount")
