from django.db import models
from django.db.models import Q

from .services.financial_year import END_YEAR_MONTHS, START_YEAR_MONTHS


# -----------------------------------------
# Scope royalty entries by client and
# by financial year
# -----------------------------------------
class RoyaltyEntryQuerySet(models.QuerySet):
    def for_client(self, client_id):
        return self.filter(client_id=client_id)

    def for_financial_year(self, financial_year):
        # Apr..Dec live in start_year, Jan..Mar in end_year
        return self.filter(
            Q(year=financial_year.start_year, month__in=START_YEAR_MONTHS)
            | Q(year=financial_year.end_year, month__in=sorted(END_YEAR_MONTHS))
        )

    def at(self, client_id, month, year):
        return self.filter(client_id=client_id, month=month, year=year).first()


# Attach RoyaltyEntryQuerySet to .objects
class RoyaltyEntryManager(models.Manager):
    def get_queryset(self):
        return RoyaltyEntryQuerySet(self.model, using=self._db)

    def for_client(self, client_id):
        return self.get_queryset().for_client(client_id)

    def for_financial_year(self, financial_year):
        return self.get_queryset().for_financial_year(financial_year)

    def at(self, client_id, month, year):
        return self.get_queryset().at(client_id, month, year)

    # RoyaltyEntry.objects.for_financial_year(fy).for_client("MRM-1")


class ClientQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def search(self, term):
        return self.filter(Q(name__icontains=term) | Q(client_id__icontains=term))


class ClientManager(models.Manager):
    def get_queryset(self):
        return ClientQuerySet(self.model, using=self._db)

    def active(self):
        return self.get_queryset().active()

    def search(self, term):
        return self.get_queryset().search(term)
