"""Cache keys for per-event read models.

Reports are cached whole and dropped on any write touching the event.
"""

from uuid import UUID

from django.core.cache import cache


def analytics_key(event_id: UUID) -> str:
    return f"events:{event_id}:analytics"


def attendance_key(event_id: UUID) -> str:
    return f"events:{event_id}:attendance"


def invalidate_event(event_id: UUID) -> None:
    cache.delete_many([analytics_key(event_id), attendance_key(event_id)])
