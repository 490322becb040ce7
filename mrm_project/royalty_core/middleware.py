from django.core.exceptions import ValidationError
from django.utils.deprecation import MiddlewareMixin
from django.utils.functional import SimpleLazyObject

from .services.financial_year import FinancialYear, current_financial_year
from .services.validation import validate_start_year


def resolve_financial_year(request):
    # ?financialYear=2024 selects FY 2024-2025, otherwise the configured year
    requested = request.GET.get("financialYear")
    if requested:
        return FinancialYear.from_start_year(validate_start_year(requested))
    return current_financial_year()


class FinancialYearMiddleware(MiddlewareMixin):
    # Attach request.financial_year on every request.
    # Lazy, so requests that never read it never touch the settings table.
    def process_request(self, request):
        request.financial_year = SimpleLazyObject(lambda: resolve_financial_year(request))
