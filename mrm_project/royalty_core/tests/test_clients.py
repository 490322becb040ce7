from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from ..exceptions import ClientNotFound
from ..models import Client, RoyaltyEntry, Setting
from ..services.clients import (create_client, get_client, list_clients,
                                remove_client, update_client)
from ..services.entries import save_entry
from ..services.financial_year import FinancialYear


class ClientModelTests(TestCase):
    def test_rate_sets_fee_on_create(self):
        client = create_client({"client_id": "MRM-1", "name": "Asha", "commission_rate": 25})
        self.assertEqual(client.fee, 0.25)
        self.assertEqual(client.display_name, "Asha (MRM-1)")

    def test_fee_edit_updates_rate(self):
        create_client({"client_id": "MRM-1", "name": "Asha", "commission_rate": 10})
        client = update_client("MRM-1", {"fee": 0.2})
        self.assertEqual(client.commission_rate, 20.0)

    def test_rate_edit_updates_fee(self):
        create_client({"client_id": "MRM-1", "name": "Asha", "commission_rate": 10})
        client = update_client("MRM-1", {"commission_rate": 15})
        client.refresh_from_db()
        self.assertEqual(client.fee, 0.15)

    def test_effective_rate_falls_back_to_fee(self):
        client = Client(client_id="MRM-1", name="Asha", fee=0.1, commission_rate=0)
        self.assertEqual(client.effective_commission_rate, 10.0)

    def test_fee_out_of_range_is_rejected(self):
        with self.assertRaises(ValidationError):
            Client.objects.create(client_id="MRM-1", name="Asha", fee=1.5, commission_rate=150)


class ClientRegistryTests(TestCase):
    def setUp(self):
        self.fy = FinancialYear.from_start_year(2025)
        create_client({"client_id": "MRM-1", "name": "Asha", "commission_rate": 10})
        save_entry("MRM-1", "apr", {"iprs_amount": 100}, self.fy)
        save_entry("MRM-1", "may", {}, self.fy)

    def test_create_requires_id_and_rejects_duplicates(self):
        with self.assertRaises(ValidationError):
            create_client({"name": "No Id"})
        with self.assertRaises(ValidationError):
            create_client({"client_id": "MRM-1", "name": "Again"})

    def test_rename_reaches_entries(self):
        update_client("MRM-1", {"name": "Asha Bhosle"})
        names = set(RoyaltyEntry.objects.values_list("client_name", flat=True))
        self.assertEqual(names, {"Asha Bhosle"})

    def test_deactivate_removes_entries_and_reactivates_on_create(self):
        remove_client("MRM-1")

        self.assertFalse(RoyaltyEntry.objects.exists())
        self.assertFalse(get_client("MRM-1").is_active)
        self.assertEqual(list_clients(), [])
        self.assertEqual(len(list_clients(include_inactive=True)), 1)

        client = create_client({"client_id": "MRM-1", "name": "Asha Returns"})
        self.assertTrue(client.is_active)
        self.assertEqual(Client.objects.count(), 1)
        self.assertEqual(client.name, "Asha Returns")

    def test_permanent_delete(self):
        remove_client("MRM-1", permanent=True)
        with self.assertRaises(ClientNotFound):
            get_client("MRM-1")
        self.assertFalse(RoyaltyEntry.objects.exists())

    def test_list_is_numeric_and_searchable(self):
        create_client({"client_id": "MRM-10", "name": "Zara"})
        create_client({"client_id": "MRM-2", "name": "Ravi"})

        self.assertEqual([c.client_id for c in list_clients()], ["MRM-1", "MRM-2", "MRM-10"])
        self.assertEqual([c.client_id for c in list_clients(search="rav")], ["MRM-2"])
        self.assertEqual([c.client_id for c in list_clients(search="MRM-1")], ["MRM-1", "MRM-10"])


class SettingTests(TestCase):
    @override_settings(ROYALTY_DEFAULT_GBP_TO_INR_RATE=110.5)
    def test_known_keys_have_defaults(self):
        self.assertEqual(Setting.get_setting("gbpToInrRate"), 110.5)
        self.assertEqual(Setting.get_setting("gstRate"), 0.18)
        self.assertIsNone(Setting.get_setting("unknownKey"))

    def test_update_and_initialize_do_not_clobber(self):
        Setting.update_setting("gbpToInrRate", 120)
        rows = Setting.initialize_defaults()

        self.assertEqual(Setting.get_setting("gbpToInrRate"), 120)
        self.assertEqual(
            {s.key for s in rows},
            {"financialYear", "gbpToInrRate", "usdToInrRate", "gstRate"},
        )
