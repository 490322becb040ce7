from django.core.management.base import BaseCommand

from royalty_core.models import Client, Setting
from royalty_core.services.clients import create_client
from royalty_core.services.entries import save_entry
from royalty_core.services.financial_year import current_financial_year

DEMO_CLIENTS = [
    {"client_id": "MRM-1", "name": "Asha Composer", "type": "Composer", "commission_rate": 10},
    {"client_id": "MRM-2", "name": "Ravi Lyricist", "type": "Lyricist", "commission_rate": 15},
    {"client_id": "MRM-3", "name": "Meera Singer", "type": "Singer ISAMRA", "commission_rate": 20,
     "isamra": True},
]

# client id -> month -> inputs
DEMO_ENTRIES = {
    "MRM-1": {
        "apr": {"iprs_amount": 10000, "prs_amount": 5000, "current_month_gst_base": 1000,
                "current_month_receipt": 500},
        "may": {"iprs_amount": 8000, "current_month_gst_base": 800},
    },
    "MRM-2": {
        "apr": {"iprs_amount": 20000, "prs_gbp": 100, "gbp_to_inr_rate": 110.5, "prs_amount": 11050},
    },
    "MRM-3": {
        "apr": {"isamra_amount": 4000, "ppl_amount": 1500, "current_month_gst_base": 1100},
        "jun": {"isamra_amount": 2500, "current_month_receipt": 1000, "current_month_tds": 100},
    },
}


class Command(BaseCommand):
    help = "Seeds the database with demo clients and royalty entries."

    def handle(self, *args, **options):
        Setting.initialize_defaults()
        fy = current_financial_year()
        self.stdout.write(self.style.NOTICE(f"Seeding demo data for {fy.label}..."))

        for data in DEMO_CLIENTS:
            if not Client.objects.filter(client_id=data["client_id"], is_active=True).exists():
                create_client(data)

        count = 0
        for client_id, months in DEMO_ENTRIES.items():
            for month, inputs in months.items():
                save_entry(client_id, month, inputs, fy)
                count += 1

        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEMO_CLIENTS)} client(s) and {count} entr(y/ies)."))
