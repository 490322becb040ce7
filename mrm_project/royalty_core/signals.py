"""Copy a client's new name onto every one of its entries."""
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Client, RoyaltyEntry


@receiver(post_save, sender=Client)
def client_renamed(sender, instance, created, **kwargs):
    if created:
        return
    # queryset update skips RoyaltyEntry.save(); only the label changes
    RoyaltyEntry.objects.filter(client_id=instance.client_id).exclude(
        client_name=instance.name
    ).update(client_name=instance.name)
