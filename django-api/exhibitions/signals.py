"""Django signals for cache invalidation and the stall counter cache.

Any write touching an event drops its cached read models. Ranking writes also
recompute the denormalized vote counters on the event's stalls.
"""

from django.apps import apps
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from exhibitions import cache
from exhibitions.domain import EventId
from exhibitions.models import (
    CheckInOut,
    Event,
    EventVolunteer,
    Feedback,
    Ranking,
    Registration,
    Stall,
)


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    cache.invalidate_event(instance.pk)


@receiver([post_save, post_delete], sender=Stall)
@receiver([post_save, post_delete], sender=CheckInOut)
@receiver([post_save, post_delete], sender=Registration)
@receiver([post_save, post_delete], sender=Feedback)
@receiver([post_save, post_delete], sender=EventVolunteer)
def invalidate_parent_event_cache(sender, instance, **kwargs):
    """Invalidate the owning event's caches when one of its rows changes."""
    cache.invalidate_event(instance.event_id)


@receiver([post_save, post_delete], sender=Ranking)
def refresh_stall_counters(sender, instance, **kwargs):
    """Recompute stall vote counters from the event's rankings."""
    service = apps.get_app_config("exhibitions").analytics_service
    service.reconcile_counters(EventId(instance.event_id))
    cache.invalidate_event(instance.event_id)
