from django.urls import path

from . import views

urlpatterns = [
    # Royalty entries
    path("royalty-accounting/", views.entries_view, name="entries"),
    path(
        "royalty-accounting/previous-outstanding/<str:client_id>/<str:month>/",
        views.previous_outstanding_view,
        name="previous-outstanding",
    ),
    path("royalty-accounting/reports/gst-invoice/", views.gst_invoice_report_view, name="report-gst-invoice"),
    path("royalty-accounting/reports/receipts-tds/", views.receipts_tds_report_view, name="report-receipts-tds"),
    path("royalty-accounting/reports/summary/", views.summary_report_view, name="report-summary"),
    path("royalty-accounting/reports/client/<str:client_id>/", views.client_report_view, name="report-client"),
    path("royalty-accounting/export/<slug:report>.csv", views.export_view, name="export"),
    path("royalty-accounting/<str:client_id>/<str:month>/", views.entry_detail_view, name="entry-detail"),
    path("royalty-accounting/<str:client_id>/<str:month>/submit/", views.entry_submit_view, name="entry-submit"),
    path("royalty-accounting/<str:client_id>/<str:month>/reopen/", views.entry_reopen_view, name="entry-reopen"),
    # Clients
    path("clients/", views.clients_view, name="clients"),
    path("clients/<str:client_id>/", views.client_detail_view, name="client-detail"),
    # Settings
    path("settings/", views.settings_view, name="settings"),
    path("settings/financial-year/", views.financial_year_setting_view, name="settings-financial-year"),
    path("settings/exchange-rate/", views.exchange_rate_setting_view, name="settings-exchange-rate"),
]
