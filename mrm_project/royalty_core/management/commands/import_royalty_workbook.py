import openpyxl
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from royalty_core.models import Client, RoyaltyEntry
from royalty_core.services.clients import create_client, update_client
from royalty_core.services.entries import save_entry
from royalty_core.services.financial_year import FinancialYear, current_financial_year
from royalty_core.services.workbook import (CLIENT_SHEET, WORKBOOK_MONTHS,
                                            is_client_row, parse_client,
                                            parse_month, royalty_type_for)


class Command(BaseCommand):
    help = "Imports clients and April-December royalty entries from the billing workbook."

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to the .xlsx workbook")
        parser.add_argument(
            "--sheet",
            default=CLIENT_SHEET,
            help=f"Worksheet holding the client rows (default: {CLIENT_SHEET})",
        )
        parser.add_argument(
            "--start-year",
            type=int,
            help="Financial year start, e.g. 2025 (default: the configured financial year)",
        )
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Delete every existing client and entry before importing",
        )

    def handle(self, *args, **options):
        try:
            wb = openpyxl.load_workbook(options["path"], read_only=True, data_only=True)
        except (OSError, ValueError) as exc:
            raise CommandError(f"Cannot open workbook: {exc}")
        if options["sheet"] not in wb.sheetnames:
            raise CommandError(f"Sheet '{options['sheet']}' not found")

        fy = (
            FinancialYear.from_start_year(options["start_year"])
            if options["start_year"]
            else current_financial_year()
        )
        rows = [row for row in wb[options["sheet"]].iter_rows(min_row=2, values_only=True)
                if is_client_row(row)]
        wb.close()
        self.stdout.write(self.style.NOTICE(f"Importing {len(rows)} client row(s) into {fy.label}..."))

        if options["clear"]:
            RoyaltyEntry.objects.all().delete()
            Client.objects.all().delete()

        clients_done = entries_done = 0
        errors = []
        for row in rows:
            client_data = parse_client(row)
            client_id = client_data["client_id"]
            try:
                with transaction.atomic():
                    entries_done += self.import_client(client_data, row, fy)
                clients_done += 1
            except ValidationError as exc:
                errors.append((client_id, "; ".join(exc.messages)))
                self.stderr.write(self.style.ERROR(f"  {client_id}: {'; '.join(exc.messages)}"))

        self.stdout.write(self.style.SUCCESS(
            f"Imported {clients_done} client(s) and {entries_done} entr(y/ies); {len(errors)} error(s)."
        ))

    def import_client(self, client_data, row, fy):
        client_id = client_data["client_id"]
        if Client.objects.filter(client_id=client_id, is_active=True).exists():
            client = update_client(client_id, client_data)
        else:
            client = create_client(client_data)

        royalty_type = royalty_type_for(client.type)
        count = 0
        # month order matters: each save carries its outstanding into the next month
        for month in WORKBOOK_MONTHS:
            data = parse_month(row, month)
            data.update(
                royalty_type=royalty_type,
                commission_rate=client.commission_rate,
                gst_rate=18,
            )
            if month == "apr":
                data["previous_month_outstanding"] = client.previous_balance
            save_entry(client_id, month, data, fy)
            count += 1
        return count
