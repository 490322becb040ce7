from django.core.exceptions import ValidationError
from django.test import TestCase

from ..exceptions import ClientNotFound, EntryNotFound
from ..models import Client, RoyaltyEntry
from ..services.entries import (delete_entry, get_entry, list_entries,
                                previous_outstanding, recalculate_financial_year,
                                reopen_entry, save_entry, submit_entry)
from ..services.financial_year import FinancialYear


class SaveEntryTests(TestCase):
    def setUp(self):
        self.fy = FinancialYear.from_start_year(2025)
        self.asha = Client.objects.create(client_id="MRM-1", name="Asha", commission_rate=10)

    def save_april(self, **extra):
        # 10% of 1000 on top of a 500 opening balance -> total outstanding 600
        data = {"iprs_amount": 1000, "previous_month_outstanding": 500}
        data.update(extra)
        return save_entry("MRM-1", "apr", data, self.fy)

    def test_creates_entry_with_computed_fields(self):
        result = self.save_april()

        self.assertTrue(result.created)
        entry = result.entry
        self.assertEqual(entry.year, 2025)
        self.assertEqual(entry.client_name, "Asha")
        self.assertEqual(entry.commission_rate, 10.0)
        self.assertEqual(entry.gst_rate, 18.0)
        self.assertEqual(entry.status, "draft")
        self.assertEqual(entry.total_commission, 100.0)
        self.assertEqual(entry.total_outstanding, 600.0)
        self.assertEqual(result.cascaded_entries, [])

    def test_previous_outstanding_is_filled_from_prior_month(self):
        self.save_april()
        may = save_entry("MRM-1", "may", {"iprs_amount": 2000}, self.fy).entry

        self.assertEqual(may.previous_month_outstanding, 600.0)
        self.assertEqual(may.total_outstanding, 800.0)

    def test_resaving_a_month_cascades_forward(self):
        self.save_april()
        save_entry("MRM-1", "may", {}, self.fy)

        result = self.save_april(iprs_amount=2000)

        self.assertFalse(result.created)
        self.assertEqual(result.entry.total_outstanding, 700.0)
        self.assertEqual(result.cascaded_count, 1)
        may = RoyaltyEntry.objects.get(client_id="MRM-1", month="may")
        self.assertEqual(may.previous_month_outstanding, 700.0)
        self.assertEqual(RoyaltyEntry.objects.count(), 2)

    def test_override_is_kept_and_flagged(self):
        self.save_april()
        with self.assertLogs("royalty_core.services.entries", level="WARNING"):
            result = save_entry("MRM-1", "may", {"previous_month_outstanding": 999}, self.fy)

        self.assertTrue(result.override_mismatch)
        self.assertEqual(result.entry.previous_month_outstanding, 999.0)

    def test_matching_previous_outstanding_is_not_flagged(self):
        self.save_april()
        result = save_entry("MRM-1", "may", {"previous_month_outstanding": 600}, self.fy)
        self.assertFalse(result.override_mismatch)

    def test_rates_default_from_client_and_gst(self):
        entry = save_entry("MRM-1", "jan", {"gst_rate": 0}, self.fy).entry
        self.assertEqual(entry.year, 2026)
        self.assertEqual(entry.gst_rate, 18.0)
        self.assertEqual(entry.commission_rate, 10.0)

    def test_sync_client_rate_updates_client(self):
        save_entry("MRM-1", "apr", {"commission_rate": 12}, self.fy, sync_client_rate=True)
        self.asha.refresh_from_db()
        self.assertEqual(self.asha.commission_rate, 12.0)
        self.assertEqual(self.asha.fee, 0.12)

    def test_unknown_client(self):
        with self.assertRaises(ClientNotFound):
            save_entry("MRM-404", "apr", {}, self.fy)

    def test_invalid_payloads_are_rejected_before_saving(self):
        bad = [
            ("MRM-1", "april", {}),
            ("", "apr", {}),
            ("MRM-1", "apr", {"iprs_amount": -1}),
            ("MRM-1", "apr", {"commission_rate": 150}),
            ("MRM-1", "apr", {"status": "archived"}),
        ]
        for client_id, month, data in bad:
            with self.assertRaises(ValidationError):
                save_entry(client_id, month, data, self.fy)
        self.assertFalse(RoyaltyEntry.objects.exists())

    def test_validation_errors_are_keyed_by_field(self):
        with self.assertRaises(ValidationError) as ctx:
            save_entry("MRM-1", "apr", {"iprs_amount": -5, "gst_rate": 101}, self.fy)
        self.assertIn("iprs_amount", ctx.exception.message_dict)
        self.assertIn("gst_rate", ctx.exception.message_dict)


class EntryLookupTests(TestCase):
    def setUp(self):
        self.fy = FinancialYear.from_start_year(2025)
        Client.objects.create(client_id="MRM-1", name="Asha", commission_rate=10)
        Client.objects.create(client_id="MRM-10", name="Zara", commission_rate=10)
        Client.objects.create(client_id="MRM-2", name="Ravi", commission_rate=10)

    def test_list_is_ordered_by_client_number_then_month(self):
        save_entry("MRM-10", "apr", {}, self.fy)
        save_entry("MRM-2", "jan", {}, self.fy)
        save_entry("MRM-2", "apr", {}, self.fy)
        save_entry("MRM-1", "may", {}, self.fy)
        # outside the financial year
        save_entry("MRM-1", "apr", {}, FinancialYear.from_start_year(2024))

        rows = [(e.client_id, e.month) for e in list_entries(self.fy)]
        self.assertEqual(rows, [
            ("MRM-1", "may"),
            ("MRM-2", "apr"),
            ("MRM-2", "jan"),
            ("MRM-10", "apr"),
        ])
        self.assertEqual(len(list_entries(self.fy, client_id="MRM-2")), 2)
        self.assertEqual(len(list_entries(self.fy, month="apr")), 2)

    def test_get_and_delete(self):
        save_entry("MRM-1", "apr", {}, self.fy)
        self.assertEqual(get_entry("MRM-1", "apr", self.fy).month, "apr")

        delete_entry("MRM-1", "apr", self.fy)
        with self.assertRaises(EntryNotFound):
            get_entry("MRM-1", "apr", self.fy)
        with self.assertRaises(EntryNotFound):
            delete_entry("MRM-1", "apr", self.fy)

    def test_previous_outstanding_lookup(self):
        save_entry("MRM-1", "apr", {"iprs_amount": 1000, "previous_month_outstanding": 50}, self.fy)
        self.assertEqual(previous_outstanding("MRM-1", "apr", self.fy), 0.0)
        self.assertEqual(previous_outstanding("MRM-1", "may", self.fy), 150.0)
        self.assertEqual(previous_outstanding("MRM-1", "jul", self.fy), 0.0)


class EntryStatusTests(TestCase):
    def setUp(self):
        self.fy = FinancialYear.from_start_year(2025)
        Client.objects.create(client_id="MRM-1", name="Asha")
        save_entry("MRM-1", "apr", {}, self.fy)

    def test_submit_then_reopen(self):
        self.assertEqual(submit_entry("MRM-1", "apr", self.fy).status, "submitted")
        # a submitted entry cannot be submitted again
        with self.assertRaises(ValidationError):
            submit_entry("MRM-1", "apr", self.fy)
        self.assertEqual(reopen_entry("MRM-1", "apr", self.fy).status, "draft")

    def test_reopen_requires_submitted(self):
        with self.assertRaises(ValidationError):
            reopen_entry("MRM-1", "apr", self.fy)
        self.assertEqual(get_entry("MRM-1", "apr", self.fy).status, "draft")


class RecalculateFinancialYearTests(TestCase):
    def setUp(self):
        self.fy = FinancialYear.from_start_year(2025)
        Client.objects.create(client_id="MRM-1", name="Asha", commission_rate=10)
        save_entry("MRM-1", "apr", {"iprs_amount": 1000, "previous_month_outstanding": 500}, self.fy)
        save_entry("MRM-1", "may", {}, self.fy)

    def test_repairs_stale_figures_and_keeps_opening_balance(self):
        # simulate stale rows written behind the model's back
        RoyaltyEntry.objects.filter(month="apr").update(total_outstanding=0)
        RoyaltyEntry.objects.filter(month="may").update(previous_month_outstanding=0, total_outstanding=0)

        changed = recalculate_financial_year(self.fy)

        self.assertEqual(changed, 2)
        apr = get_entry("MRM-1", "apr", self.fy)
        may = get_entry("MRM-1", "may", self.fy)
        self.assertEqual(apr.previous_month_outstanding, 500.0)
        self.assertEqual(apr.total_outstanding, 600.0)
        self.assertEqual(may.previous_month_outstanding, 600.0)
        self.assertEqual(may.total_outstanding, 600.0)

    def test_consistent_year_reports_no_changes(self):
        self.assertEqual(recalculate_financial_year(self.fy), 0)
