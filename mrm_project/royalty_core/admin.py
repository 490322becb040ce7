from django.contrib import admin, messages

from .models import Client, RoyaltyEntry, Setting
from .services.calculation import COMPUTED_FIELDS
from .services.entries import recalculate_financial_year
from .services.financial_year import END_YEAR_MONTHS, FinancialYear


# Register `Client` model
@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = (
        "client_id",
        "name",
        "type",
        "commission_rate",
        "fee",
        "previous_balance",
        "is_active",
    )
    list_filter = ("is_active", "type", "iprs", "prs", "isamra")
    search_fields = ("client_id", "name")


# Register `RoyaltyEntry` model
@admin.register(RoyaltyEntry)
class RoyaltyEntryAdmin(admin.ModelAdmin):
    list_display = (
        "client",
        "client_name",
        "month",
        "year",
        "commission_rate",
        "total_commission",
        "monthly_outstanding",
        "total_outstanding",
        "status",
    )
    list_filter = ("status", "year", "month")
    search_fields = ("client__client_id", "client_name")
    actions = ["recalculate_selected_years"]
    # derived figures are recomputed on every save
    readonly_fields = COMPUTED_FIELDS + ("client_name", "created_at", "updated_at")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("client")

    @admin.action(description="Recalculate financial year of selected entries")
    def recalculate_selected_years(self, request, queryset):
        # jan/feb/mar belong to the year that started the previous April
        years = {
            FinancialYear.from_start_year(e.year - 1 if e.month in END_YEAR_MONTHS else e.year)
            for e in queryset
        }
        changed = sum(recalculate_financial_year(fy) for fy in years)
        self.message_user(
            request,
            f"Recalculated {len(years)} financial year(s), {changed} entr(y/ies) changed.",
            level=messages.SUCCESS,
        )


# Register `Setting` model
@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ("key", "value", "description", "updated_at")
    search_fields = ("key",)
