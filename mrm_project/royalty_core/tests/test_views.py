from django.test import TestCase

from ..models import Client, RoyaltyEntry, Setting

ENTRIES_URL = "/api/royalty-accounting/"


class EntryApiTests(TestCase):
    def setUp(self):
        Client.objects.create(client_id="MRM-1", name="Asha", commission_rate=10)

    def post_entry(self, body):
        return self.client.post(ENTRIES_URL + "?financialYear=2025", body, content_type="application/json")

    def test_save_returns_camel_case_entry(self):
        response = self.post_entry({"clientId": "MRM-1", "month": "apr", "iprsAmount": 1000})

        self.assertEqual(response.status_code, 201)
        entry = response.json()["entry"]
        self.assertEqual(entry["clientId"], "MRM-1")
        self.assertEqual(entry["year"], 2025)
        self.assertEqual(entry["totalCommission"], 100.0)
        self.assertEqual(entry["totalOutstanding"], 100.0)
        self.assertNotIn("cascadedEntries", response.json())

    def test_save_reports_cascaded_months(self):
        self.post_entry({"clientId": "MRM-1", "month": "apr", "iprsAmount": 1000})
        self.post_entry({"clientId": "MRM-1", "month": "may"})

        response = self.post_entry({"clientId": "MRM-1", "month": "apr", "iprsAmount": 3000})

        body = response.json()
        self.assertEqual(len(body["cascadedEntries"]), 1)
        self.assertEqual(body["cascadedEntries"][0]["previousMonthOutstanding"], 300.0)

    def test_validation_and_not_found(self):
        response = self.post_entry({"clientId": "MRM-1", "month": "april"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("month", response.json()["errors"])

        response = self.post_entry({"clientId": "MRM-1", "month": "apr", "pplAmount": -3})
        self.assertIn("pplAmount", response.json()["errors"])

        response = self.post_entry({"clientId": "MRM-9", "month": "apr"})
        self.assertEqual(response.status_code, 404)

        response = self.client.get(ENTRIES_URL + "MRM-1/jun/?financialYear=2025")
        self.assertEqual(response.status_code, 404)

    def test_non_finite_and_oversized_amounts_are_rejected(self):
        response = self.post_entry('{"clientId": "MRM-1", "month": "apr", "iprsAmount": Infinity}')
        self.assertEqual(response.status_code, 400)
        self.assertIn("iprsAmount", response.json()["errors"])

        response = self.post_entry({"clientId": "MRM-1", "month": "apr", "prsAmount": "1e400"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("prsAmount", response.json()["errors"])

        response = self.post_entry({"clientId": "MRM-1", "month": "apr", "previousMonthOutstanding": -1e13})
        self.assertEqual(response.status_code, 400)
        self.assertIn("previousMonthOutstanding", response.json()["errors"])

        self.assertFalse(RoyaltyEntry.objects.exists())

    def test_bad_financial_year_and_body(self):
        response = self.client.get(ENTRIES_URL + "?financialYear=abc")
        self.assertEqual(response.status_code, 400)

        response = self.client.post(ENTRIES_URL, "not json", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_method_not_allowed(self):
        response = self.client.put(ENTRIES_URL, {}, content_type="application/json")
        self.assertEqual(response.status_code, 405)

    def test_list_detail_status_and_delete(self):
        self.post_entry({"clientId": "MRM-1", "month": "apr", "iprsAmount": 1000})

        listing = self.client.get(ENTRIES_URL + "?financialYear=2025&clientId=MRM-1").json()
        self.assertEqual(len(listing["entries"]), 1)
        self.assertEqual(listing["financialYear"], {"startYear": 2025, "endYear": 2026})

        detail_url = ENTRIES_URL + "MRM-1/apr/?financialYear=2025"
        self.assertEqual(self.client.get(detail_url).json()["entry"]["month"], "apr")

        response = self.client.post(ENTRIES_URL + "MRM-1/apr/submit/?financialYear=2025")
        self.assertEqual(response.json()["entry"]["status"], "submitted")
        response = self.client.post(ENTRIES_URL + "MRM-1/apr/submit/?financialYear=2025")
        self.assertEqual(response.status_code, 400)
        response = self.client.post(ENTRIES_URL + "MRM-1/apr/reopen/?financialYear=2025")
        self.assertEqual(response.json()["entry"]["status"], "draft")

        response = self.client.get(ENTRIES_URL + "previous-outstanding/MRM-1/may/?financialYear=2025")
        self.assertEqual(response.json()["previousMonthOutstanding"], 100.0)

        self.assertEqual(self.client.delete(detail_url).status_code, 200)
        self.assertFalse(RoyaltyEntry.objects.exists())

    def test_uses_configured_financial_year_by_default(self):
        Setting.update_setting("financialYear", {"startYear": 2024, "endYear": 2025})
        response = self.client.post(
            ENTRIES_URL, {"clientId": "MRM-1", "month": "feb"}, content_type="application/json"
        )
        self.assertEqual(response.json()["entry"]["year"], 2025)


class ReportApiTests(TestCase):
    def setUp(self):
        Client.objects.create(client_id="MRM-1", name="Asha", commission_rate=10)
        self.client.post(
            ENTRIES_URL + "?financialYear=2025",
            {"clientId": "MRM-1", "month": "apr", "iprsAmount": 1000},
            content_type="application/json",
        )

    def test_summary_and_client_report(self):
        summary = self.client.get(ENTRIES_URL + "reports/summary/?financialYear=2025").json()
        self.assertEqual(summary["totalEntries"], 1)
        self.assertEqual(summary["totalCommission"], 100.0)

        report = self.client.get(ENTRIES_URL + "reports/client/MRM-1/?financialYear=2025").json()
        self.assertEqual(report["client"]["displayName"], "Asha (MRM-1)")
        self.assertEqual(report["summary"]["totalOutstanding"], 100.0)

        totals = self.client.get(ENTRIES_URL + "reports/gst-invoice/?financialYear=2025").json()["totals"]
        self.assertEqual(totals["totalCommission"], 100.0)

    def test_csv_export(self):
        response = self.client.get(ENTRIES_URL + "export/commission.csv?financialYear=2025")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "text/csv")
        lines = response.content.decode().splitlines()
        self.assertTrue(lines[0].startswith("Client ID,Client Name,Month,Year,Commission Rate"))
        self.assertEqual(len(lines), 2)

        response = self.client.get(ENTRIES_URL + "export/unknown.csv")
        self.assertEqual(response.status_code, 404)


class ClientAndSettingApiTests(TestCase):
    def test_client_crud(self):
        response = self.client.post(
            "/api/clients/",
            {"clientId": "MRM-7", "name": "Meera", "commissionRate": 20},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["client"]["fee"], 0.2)

        response = self.client.put(
            "/api/clients/MRM-7/", {"name": "Meera S"}, content_type="application/json"
        )
        self.assertEqual(response.json()["client"]["name"], "Meera S")

        self.assertEqual(len(self.client.get("/api/clients/?search=meera").json()["clients"]), 1)

        self.assertEqual(self.client.delete("/api/clients/MRM-7/").status_code, 200)
        self.assertEqual(self.client.get("/api/clients/").json()["clients"], [])
        self.assertEqual(self.client.get("/api/clients/MRM-8/").status_code, 404)

    def test_settings(self):
        settings_body = self.client.get("/api/settings/").json()["settings"]
        self.assertIn("financialYear", settings_body)
        self.assertIn("gbpToInrRate", settings_body)

        response = self.client.put(
            "/api/settings/financial-year/", {"startYear": 2026}, content_type="application/json"
        )
        self.assertEqual(response.json()["financialYear"], {"startYear": 2026, "endYear": 2027})
        self.assertEqual(Setting.get_setting("financialYear")["startYear"], 2026)

        response = self.client.put(
            "/api/settings/exchange-rate/", {"rate": 0}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.put(
            "/api/settings/exchange-rate/", {"currency": "usd", "rate": 84.1},
            content_type="application/json",
        )
        self.assertEqual(response.json(), {"usdToInrRate": 84.1})
        self.assertEqual(Setting.get_setting("usdToInrRate"), 84.1)
