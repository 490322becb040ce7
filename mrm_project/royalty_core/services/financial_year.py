from dataclasses import dataclass

from django.core.exceptions import ValidationError

# Financial-year month order: April of start_year through March of end_year
MONTH_ORDER = ("apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec", "jan", "feb", "mar")
END_YEAR_MONTHS = frozenset({"jan", "feb", "mar"})
START_YEAR_MONTHS = tuple(m for m in MONTH_ORDER if m not in END_YEAR_MONTHS)

MONTH_LABELS = {
    "apr": "April", "may": "May", "jun": "June", "jul": "July",
    "aug": "August", "sep": "September", "oct": "October", "nov": "November",
    "dec": "December", "jan": "January", "feb": "February", "mar": "March",
}


@dataclass(frozen=True)
class FinancialYear:
    start_year: int
    end_year: int

    @classmethod
    def from_start_year(cls, start_year):
        start_year = int(start_year)
        return cls(start_year=start_year, end_year=start_year + 1)

    @classmethod
    def from_setting(cls, value):
        """Build from the stored {"startYear": .., "endYear": ..} setting value."""
        start_year = int(value["startYear"])
        return cls(start_year=start_year, end_year=int(value.get("endYear", start_year + 1)))

    def to_setting(self):
        return {"startYear": self.start_year, "endYear": self.end_year}

    @property
    def label(self):
        return f"FY {self.start_year}-{self.end_year}"

    def year_for(self, month):
        return year_for_month(month, self)

    def months(self):
        """Ordered (month, calendar year) pairs for the whole year."""
        return [(m, self.year_for(m)) for m in MONTH_ORDER]


def month_index(month):
    try:
        return MONTH_ORDER.index(month)
    except ValueError:
        raise ValidationError({"month": f"Invalid month '{month}'. Expected one of {', '.join(MONTH_ORDER)}"})


def year_for_month(month, financial_year):
    """Jan/Feb/Mar fall in the end year, every other month in the start year."""
    month_index(month)
    return financial_year.end_year if month in END_YEAR_MONTHS else financial_year.start_year


def previous_month(month):
    """The month before `month` in the same financial year, or None for April."""
    index = month_index(month)
    return MONTH_ORDER[index - 1] if index > 0 else None


def current_financial_year():
    """Active financial year from the settings store."""
    from ..models import Setting

    return FinancialYear.from_setting(Setting.get_setting("financialYear"))
