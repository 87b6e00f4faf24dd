from django.apps import AppConfig
from django.conf import settings


class ExhibitionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "exhibitions"

    def ready(self) -> None:
        from exhibitions import signals  # noqa: F401
        from exhibitions.config import CoreConfig
        from exhibitions.services import AnalyticsService, EventService
        from exhibitions.stores.django_store import (
            DjangoAnalyticsStore,
            DjangoAuditSink,
            DjangoEventStore,
        )

        self.core_config = CoreConfig.from_settings(getattr(settings, "EXHIBITIONS", {}))
        events = DjangoEventStore()
        self.event_service = EventService(events, DjangoAuditSink(), self.core_config)
        self.analytics_service = AnalyticsService(events, DjangoAnalyticsStore(), self.core_config)
