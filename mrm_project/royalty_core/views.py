import json
import logging
from functools import wraps

from django.core.exceptions import ValidationError
from django.http import Http404, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from . import export
from .exceptions import ClientNotFound, EntryNotFound
from .models import Setting
from .serializers import (CLIENT_FIELDS, ENTRY_INPUT_FIELDS, client_to_dict,
                          entry_to_dict, payload_to_data, snake_to_camel)
from .services import clients as client_service
from .services import entries as entry_service
from .services import reports
from .services.financial_year import FinancialYear
from .services.validation import validate_exchange_rate, validate_start_year

logger = logging.getLogger(__name__)

EXCHANGE_RATE_KEYS = {"GBP": "gbpToInrRate", "USD": "usdToInrRate"}


def error_response(error, status):
    body = {"ok": False, "error": str(error)}
    if isinstance(error, ValidationError):
        if hasattr(error, "error_dict"):
            body["errors"] = {snake_to_camel(k): v for k, v in error.message_dict.items()}
        body["error"] = "; ".join(error.messages)
    return JsonResponse(body, status=status)


def api_view(*methods):
    """JSON endpoint: method guard, no CSRF, domain errors mapped to 400/404."""
    def decorator(view):
        @csrf_exempt
        @require_http_methods(list(methods))
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                return view(request, *args, **kwargs)
            except ValidationError as e:
                return error_response(e, status=400)
            except (ClientNotFound, EntryNotFound) as e:
                return error_response(e, status=404)
        return wrapper
    return decorator


def read_json(request):
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def camel_keys(data):
    return {snake_to_camel(k): v for k, v in data.items()}


def query_flag(request, name):
    return request.GET.get(name, "").lower() in ("1", "true", "yes")


# ----------------------------------------------
# Royalty entries
# ----------------------------------------------
@api_view("GET", "POST")
def entries_view(request):
    fy = request.financial_year
    if request.method == "GET":
        rows = entry_service.list_entries(
            fy,
            client_id=request.GET.get("clientId") or None,
            month=request.GET.get("month") or None,
        )
        return JsonResponse({"financialYear": fy.to_setting(),
                             "entries": [entry_to_dict(e) for e in rows]})

    payload = read_json(request)
    result = entry_service.save_entry(
        payload.get("clientId"),
        payload.get("month"),
        payload_to_data(payload, ENTRY_INPUT_FIELDS),
        fy,
        sync_client_rate=bool(payload.get("syncClientRate")),
    )
    body = {"entry": entry_to_dict(result.entry)}
    if result.cascaded_entries:
        body["cascadedEntries"] = [entry_to_dict(e) for e in result.cascaded_entries]
    if result.override_mismatch:
        body["warning"] = "previousMonthOutstanding differs from the previous month's totalOutstanding"
    return JsonResponse(body, status=201)


@api_view("GET", "DELETE")
def entry_detail_view(request, client_id, month):
    fy = request.financial_year
    if request.method == "DELETE":
        entry_service.delete_entry(client_id, month, fy)
        return JsonResponse({"ok": True})
    return JsonResponse({"entry": entry_to_dict(entry_service.get_entry(client_id, month, fy))})


@api_view("POST")
def entry_submit_view(request, client_id, month):
    entry = entry_service.submit_entry(client_id, month, request.financial_year)
    return JsonResponse({"entry": entry_to_dict(entry)})


@api_view("POST")
def entry_reopen_view(request, client_id, month):
    entry = entry_service.reopen_entry(client_id, month, request.financial_year)
    return JsonResponse({"entry": entry_to_dict(entry)})


@api_view("GET")
def previous_outstanding_view(request, client_id, month):
    value = entry_service.previous_outstanding(client_id, month, request.financial_year)
    return JsonResponse({"clientId": client_id, "month": month, "previousMonthOutstanding": value})


# ----------------------------------------------
# Reports & CSV
# ----------------------------------------------
def _entries_report(report):
    return {
        "entries": [entry_to_dict(e) for e in report["entries"]],
        "totals": camel_keys(report["totals"]),
    }


@api_view("GET")
def gst_invoice_report_view(request):
    return JsonResponse(_entries_report(reports.gst_invoice_report(request.financial_year)))


@api_view("GET")
def receipts_tds_report_view(request):
    return JsonResponse(_entries_report(reports.receipts_tds_report(request.financial_year)))


@api_view("GET")
def summary_report_view(request):
    return JsonResponse(camel_keys(reports.summary_report(request.financial_year)))


@api_view("GET")
def client_report_view(request, client_id):
    client = client_service.get_client(client_id)
    report = reports.client_report(client.client_id, request.financial_year)
    return JsonResponse({
        "client": client_to_dict(client),
        "entries": [entry_to_dict(e) for e in report["entries"]],
        "summary": camel_keys(report["summary"]),
    })


@api_view("GET")
def export_view(request, report):
    fy = request.financial_year
    if report == "clients":
        content = export.client_master_csv(client_service.list_clients())
    elif report == "commission":
        content = export.commission_csv(entry_service.list_entries(fy))
    elif report == "outstanding":
        content = export.outstanding_csv(reports.latest_outstanding(fy)["entries"])
    elif report == "gst-invoice":
        content = export.gst_invoice_csv(entry_service.list_entries(fy))
    elif report == "receipts-tds":
        content = export.receipts_tds_csv(entry_service.list_entries(fy))
    else:
        raise Http404(f"Unknown export '{report}'")

    response = HttpResponse(content, content_type="text/csv")
    filename = f"{report}-{fy.start_year}-{fy.end_year}.csv"
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


# ----------------------------------------------
# Clients
# ----------------------------------------------
@api_view("GET", "POST")
def clients_view(request):
    if request.method == "GET":
        rows = client_service.list_clients(
            search=request.GET.get("search") or None,
            include_inactive=query_flag(request, "includeInactive"),
        )
        return JsonResponse({"clients": [client_to_dict(c) for c in rows]})

    client = client_service.create_client(payload_to_data(read_json(request), CLIENT_FIELDS))
    return JsonResponse({"client": client_to_dict(client)}, status=201)


@api_view("GET", "PUT", "DELETE")
def client_detail_view(request, client_id):
    if request.method == "PUT":
        data = payload_to_data(read_json(request), CLIENT_FIELDS)
        data.pop("client_id", None)
        client = client_service.update_client(client_id, data)
    elif request.method == "DELETE":
        client = client_service.remove_client(client_id, permanent=query_flag(request, "permanent"))
        return JsonResponse({"ok": True, "clientId": client.client_id})
    else:
        client = client_service.get_client(client_id)
    return JsonResponse({"client": client_to_dict(client)})


# ----------------------------------------------
# Settings
# ----------------------------------------------
@api_view("GET")
def settings_view(request):
    rows = Setting.initialize_defaults()
    return JsonResponse({"settings": {s.key: s.value for s in rows}})


@api_view("PUT")
def financial_year_setting_view(request):
    payload = read_json(request)
    fy = FinancialYear.from_start_year(validate_start_year(payload.get("startYear")))
    Setting.update_setting("financialYear", fy.to_setting())
    logger.info("Financial year set to %s", fy.label)
    return JsonResponse({"financialYear": fy.to_setting(), "label": fy.label})


@api_view("PUT")
def exchange_rate_setting_view(request):
    payload = read_json(request)
    currency = str(payload.get("currency") or "GBP").upper()
    key = EXCHANGE_RATE_KEYS.get(currency)
    if key is None:
        raise ValidationError({"currency": f"Unsupported currency '{currency}'"})
    rate = validate_exchange_rate(payload.get("rate"))
    Setting.update_setting(key, rate)
    logger.info("%s to INR rate set to %s", currency, rate)
    return JsonResponse({key: rate})
